import asyncio
from unittest.mock import MagicMock, patch

import httpx
import pytest

from climate_jobs.services import llm_client
from climate_jobs.services.text_recognizer import HuggingFaceRecognizer, generated_text
from climate_jobs.utils.exceptions import ConfigurationError


@pytest.mark.parametrize(
    "payload, expected",
    [
        ([{"generated_text": "482913"}], "482913"),
        ({"generated_text": "hello"}, "hello"),
        ([], ""),
        ({"error": "loading"}, ""),
        ("plain", ""),
    ],
)
def test_generated_text_shapes(payload, expected):
    assert generated_text(payload) == expected


def test_huggingface_recognizer_posts_image():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = request.content
        return httpx.Response(200, json=[{"generated_text": " 482 913 \n"}])

    rec = HuggingFaceRecognizer(
        base_url="https://hf.example/", token="hf_x", transport=httpx.MockTransport(handler),
    )
    text = asyncio.run(rec.infer(b"img", "microsoft/trocr-base-printed"))

    assert text == "482 913"
    assert seen["url"] == "https://hf.example/models/microsoft/trocr-base-printed"
    assert seen["auth"] == "Bearer hf_x"
    assert seen["body"] == b"img"


def test_huggingface_recognizer_raises_on_http_error():
    rec = HuggingFaceRecognizer(
        base_url="https://hf.example",
        token=None,
        transport=httpx.MockTransport(lambda request: httpx.Response(503, json={"error": "loading"})),
    )
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(rec.infer(b"img", "m"))


def test_extract_json_array():
    assert llm_client.extract_json_array('```json\n[1, 2]\n```') == [1, 2]
    assert llm_client.extract_json_array('ranking: [{"a": 1}] done') == [{"a": 1}]
    with pytest.raises(ValueError):
        llm_client.extract_json_array('{"a": 1}')


def test_chat_requires_key(monkeypatch):
    monkeypatch.setattr(llm_client, "GROQ_API_KEY", None)
    with pytest.raises(ConfigurationError):
        llm_client.chat("sys", "hi")


def test_chat_sends_openai_payload(monkeypatch):
    monkeypatch.setattr(llm_client, "GROQ_API_KEY", "gsk_test")
    response = MagicMock(ok=True)
    response.json.return_value = {"choices": [{"message": {"content": "  [1]  "}}]}

    with patch.object(llm_client.requests, "post", return_value=response) as post:
        text = llm_client.chat("sys", "hi", temperature=0.3, max_tokens=100)

    assert text == "[1]"
    _, kwargs = post.call_args
    assert post.call_args[0][0].endswith("/chat/completions")
    assert kwargs["headers"]["Authorization"] == "Bearer gsk_test"
    assert kwargs["json"]["messages"][1] == {"role": "user", "content": "hi"}
    assert kwargs["json"]["temperature"] == 0.3
    assert kwargs["json"]["max_tokens"] == 100
