import json, re
import requests
from typing import Any, Optional
from climate_jobs.utils.config import GROQ_API_URL, GROQ_API_KEY, GROQ_MODEL
from climate_jobs.utils.exceptions import ConfigurationError
from climate_jobs.utils.logger import get_logger


logger = get_logger("llm-client")

_FENCED = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_ARRAY = re.compile(r"\[[\s\S]*\]")


def is_configured() -> bool:
    return bool(GROQ_API_KEY)


def chat(
    system: str,
    prompt: str,
    temperature: float = 0.7,
    max_tokens: Optional[int] = None,
) -> str:
    """
    Calls the OpenAI-compatible /chat/completions endpoint and returns the
    first choice's message content.
    """
    if not GROQ_API_KEY:
        raise ConfigurationError("GROQ_API_KEY not configured")

    url = f"{GROQ_API_URL}/chat/completions"
    payload: dict[str, Any] = {
        "model": GROQ_MODEL,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ],
        "temperature": temperature,
    }
    if max_tokens:
        payload["max_tokens"] = max_tokens

    logger.debug("LLM request → %s (%s)", url, GROQ_MODEL)
    r = requests.post(
        url,
        json=payload,
        headers={"Authorization": f"Bearer {GROQ_API_KEY}"},
        timeout=120,
    )
    if not r.ok:
        logger.error("LLM API error: %s %s", r.status_code, r.text)
        r.raise_for_status()
    data = r.json()
    return (data["choices"][0]["message"]["content"] or "").strip()


def extract_json_array(text: str) -> list[Any]:
    """Pull a JSON array out of a reply that may wrap it in a code fence or prose."""
    m = _FENCED.search(text) or _ARRAY.search(text)
    raw = (m.group(1) if m and m.lastindex else m.group(0)) if m else text
    value = json.loads(raw)
    if not isinstance(value, list):
        raise ValueError(f"expected a JSON array, got {type(value).__name__}")
    return value
