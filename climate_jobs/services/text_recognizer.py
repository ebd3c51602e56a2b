from typing import Any, Optional, Protocol

import httpx

from climate_jobs.utils.config import HF_API_URL, HF_API_TOKEN, OCR_TIMEOUT_SECONDS
from climate_jobs.utils.logger import get_logger


logger = get_logger("text-recognizer")


class TextRecognizer(Protocol):
    async def infer(self, image: bytes, model_id: str) -> str:
        """Transcribe the image with one image-to-text model."""
        ...


def generated_text(result: Any) -> str:
    # Inference endpoints answer either [{"generated_text": ...}] or {"generated_text": ...}
    if isinstance(result, list):
        result = result[0] if result else {}
    if isinstance(result, dict):
        return str(result.get("generated_text") or "")
    return ""


class HuggingFaceRecognizer:
    """Runs TrOCR-style image-to-text models on a Hugging Face inference endpoint."""

    def __init__(
        self,
        base_url: str = HF_API_URL,
        token: Optional[str] = HF_API_TOKEN,
        timeout: float = OCR_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport

    def _headers(self, content_type: str) -> dict[str, str]:
        headers = {"Content-Type": content_type}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def infer(self, image: bytes, model_id: str, content_type: str = "application/octet-stream") -> str:
        url = f"{self.base_url}/models/{model_id}"
        logger.debug("OCR request → %s (%d bytes)", url, len(image))
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(url, content=image, headers=self._headers(content_type))
            resp.raise_for_status()
            return generated_text(resp.json()).strip()
