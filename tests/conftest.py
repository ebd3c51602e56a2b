"""Pytest configuration and shared fixtures for the climate-jobs tests.

- Deterministic fake OCR recognizer (no model runtime, no network)
- In-memory work store standing in for Supabase storage + tables
- Flask test client wired to both fakes
"""

import asyncio
from typing import Any

import pytest

from climate_jobs.server import create_app
from climate_jobs.services.verification import ProofVerifier


MODELS = (
    "trocr-large-handwritten",
    "trocr-base-handwritten",
    "trocr-large-printed",
    "trocr-base-printed",
)

TOKEN = "482913"
IMAGE = b"\x89PNG fake proof photo"


class FakeRecognizer:
    """Scripted OCR: ``outputs`` maps model id → text, or an exception to raise."""

    def __init__(self, outputs: dict[str, Any] | None = None, default: str = ""):
        self.outputs = dict(outputs or {})
        self.default = default
        self.calls: list[tuple[bytes, str]] = []

    async def infer(self, image: bytes, model_id: str) -> str:
        self.calls.append((image, model_id))
        out = self.outputs.get(model_id, self.default)
        if isinstance(out, BaseException):
            raise out
        return out

    @property
    def models_called(self) -> list[str]:
        return [m for _, m in self.calls]


class FakeWorkStore:
    def __init__(self, fail_with: Exception | None = None):
        self.fail_with = fail_with
        self.uploads: list[dict[str, Any]] = []
        self.rows: list[dict[str, Any]] = []

    @property
    def touched(self) -> bool:
        return bool(self.uploads or self.rows)

    def upload_media(self, user_id: str, data: bytes, extension: str, content_type: str) -> str:
        if self.fail_with:
            raise self.fail_with
        self.uploads.append({"user_id": user_id, "data": data, "extension": extension, "content_type": content_type})
        return f"https://storage.example/micro-job-media/{user_id}/1.{extension}"

    def insert_work(self, row: dict[str, Any]) -> str:
        self.rows.append(row)
        return f"job-{len(self.rows)}"


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer(default="no digits here")


@pytest.fixture
def store() -> FakeWorkStore:
    return FakeWorkStore()


@pytest.fixture
def verifier(recognizer: FakeRecognizer) -> ProofVerifier:
    return ProofVerifier(recognizer, MODELS, timeout=1.0, token=TOKEN)


@pytest.fixture
def verified(recognizer: FakeRecognizer) -> ProofVerifier:
    """A workflow whose first model read the token from IMAGE."""
    recognizer.outputs[MODELS[0]] = f"Work done! {TOKEN} #climate"
    v = ProofVerifier(recognizer, MODELS, timeout=1.0, token=TOKEN)
    asyncio.run(v.supply_image(IMAGE))
    return v


@pytest.fixture
def app(recognizer: FakeRecognizer, store: FakeWorkStore):
    app = create_app(recognizer=recognizer, store=store, models=MODELS)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
