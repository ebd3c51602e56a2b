"""
verification.py – challenge-token proof-of-work verification

A user is shown a 6-digit token, photographs it next to their work, and the
photo is transcribed by an ordered list of image-to-text models. The first
model whose transcription contains the token verifies the proof; if none
does, the run ends as not_verified and the user must supply a new image.

Each supplied image starts a new run. Runs are stamped with an increasing
run id, and a run only commits results while it is still the latest one, so
a slow, superseded run can never overwrite the state of a newer run.
"""

import asyncio
import re
import secrets
import threading
from hashlib import sha256
from typing import Optional, Sequence

from climate_jobs.models.submission_schema import (
    RecognitionAttempt,
    VerificationResult,
    VerificationStatus,
)
from climate_jobs.services.text_recognizer import TextRecognizer
from climate_jobs.utils.config import OCR_MODELS, OCR_TIMEOUT_SECONDS, MAX_PROOF_BYTES
from climate_jobs.utils.exceptions import ValidationError
from climate_jobs.utils.logger import get_logger


logger = get_logger("verification")

TOKEN_LENGTH = 6
_NON_DIGIT = re.compile(r"[^0-9]")


def generate_token() -> str:
    """Six random decimal digits, 100000–999999."""
    return str(100000 + secrets.randbelow(900000))


def digits_only(text: str | None) -> str:
    return _NON_DIGIT.sub("", text or "")


def matches(recognized_text: str | None, challenge_token: str | None) -> bool:
    """True iff the token's digits appear unbroken, in order, among the recognized digits."""
    token_digits = digits_only(challenge_token)
    if not token_digits:
        return False
    return token_digits in digits_only(recognized_text)


def validate_proof_image(data: bytes, content_type: str | None, max_bytes: int = MAX_PROOF_BYTES) -> None:
    if not data:
        raise ValidationError("Proof image is empty", field="file")
    if len(data) > max_bytes:
        raise ValidationError(f"File size must be less than {max_bytes // (1024 * 1024)}MB", field="file")
    if not (content_type or "").startswith("image"):
        raise ValidationError("Please upload an image with the verification token visible", field="file")


class ProofVerifier:
    """
    One verification workflow: owns the challenge token and the state of the
    latest run. Models are invoked one at a time, in priority order, and the
    loop stops at the first match.
    """

    def __init__(
        self,
        recognizer: TextRecognizer,
        models: Sequence[str] = OCR_MODELS,
        timeout: Optional[float] = OCR_TIMEOUT_SECONDS,
        token: Optional[str] = None,
    ):
        if not models:
            raise ValueError("at least one OCR model is required")
        self.recognizer = recognizer
        self.models = tuple(models)
        self.timeout = timeout
        self._token = token or generate_token()
        self._lock = threading.Lock()
        self._run_id = 0
        self._status = VerificationStatus.IDLE
        self._attempts: list[RecognitionAttempt] = []
        self._matched: Optional[RecognitionAttempt] = None
        self._image: Optional[bytes] = None
        self._image_sha256: Optional[str] = None

    @property
    def token(self) -> str:
        return self._token

    @property
    def status(self) -> VerificationStatus:
        return self._status

    @property
    def run_id(self) -> int:
        return self._run_id

    @property
    def image(self) -> Optional[bytes]:
        return self._image

    @property
    def image_sha256(self) -> Optional[str]:
        return self._image_sha256

    @property
    def attempts(self) -> list[RecognitionAttempt]:
        return list(self._attempts)

    def result(self) -> VerificationResult:
        with self._lock:
            return VerificationResult(
                status=self._status,
                token=self._token,
                run_id=self._run_id,
                matched_model=self._matched.model_id if self._matched else None,
                matched_text=self._matched.text if self._matched else None,
                image_sha256=self._image_sha256,
                attempts=list(self._attempts),
            )

    async def recognize(self, image: bytes, model_id: str) -> RecognitionAttempt:
        """Run one model; failures and timeouts become attempts, never exceptions."""
        try:
            call = self.recognizer.infer(image, model_id)
            text = await (asyncio.wait_for(call, self.timeout) if self.timeout else call)
        except asyncio.TimeoutError:
            logger.warning("OCR timed out for %s after %ss", model_id, self.timeout)
            return RecognitionAttempt(model_id=model_id, error=f"timed out after {self.timeout}s")
        except Exception as e:
            logger.warning("OCR failed for %s: %s", model_id, e)
            return RecognitionAttempt(model_id=model_id, error=str(e) or type(e).__name__)
        text = text or ""
        return RecognitionAttempt(
            model_id=model_id,
            text=text,
            digits=digits_only(text),
            matched=matches(text, self._token),
        )

    def _begin(self, image: bytes) -> int:
        with self._lock:
            self._run_id += 1
            self._status = VerificationStatus.VERIFYING
            self._attempts = []
            self._matched = None
            self._image = image
            self._image_sha256 = sha256(image).hexdigest()
            return self._run_id

    def _commit(self, run_id: int, attempt: RecognitionAttempt) -> bool:
        with self._lock:
            if run_id != self._run_id:
                return False
            self._attempts.append(attempt)
            if attempt.matched:
                self._matched = attempt
                self._status = VerificationStatus.VERIFIED
            return True

    def _finish(self, run_id: int) -> None:
        with self._lock:
            if run_id == self._run_id and self._status is VerificationStatus.VERIFYING:
                self._status = VerificationStatus.NOT_VERIFIED

    async def supply_image(self, image: bytes) -> VerificationResult:
        """
        Start a new run over ``image``, superseding any run still in flight.
        Returns the workflow's result once this run ends or is superseded.
        """
        run_id = self._begin(image)
        logger.info("Verification run %d started (%d models)", run_id, len(self.models))

        for model_id in self.models:
            attempt = await self.recognize(image, model_id)
            if not self._commit(run_id, attempt):
                logger.info("Run %d superseded; discarding %s result", run_id, model_id)
                return self.result()
            if attempt.matched:
                logger.info("Run %d verified by %s: %r", run_id, model_id, attempt.text)
                return self.result()

        self._finish(run_id)
        if run_id == self._run_id:
            logger.info("Run %d: token %s not found by any of %d models", run_id, self._token, len(self.models))
        return self.result()
