from typing import Any, Optional, Protocol

from climate_jobs.models.submission_schema import (
    BASE_BENEFIT_POINTS,
    WORK_TYPES,
    SubmissionResult,
    VerificationResult,
    VerificationStatus,
    WorkDraft,
)
from climate_jobs.services.verification import ProofVerifier
from climate_jobs.utils.exceptions import AuthenticationError, SubmissionError, ValidationError
from climate_jobs.utils.logger import get_logger


logger = get_logger("submission-gate")

REQUIRED_FIELDS = ("title", "description", "work_type", "location")


class WorkStore(Protocol):
    def upload_media(self, user_id: str, data: bytes, extension: str, content_type: str) -> str: ...

    def insert_work(self, row: dict[str, Any]) -> str: ...


def validate_draft(draft: WorkDraft, verifier: ProofVerifier) -> VerificationResult:
    """
    Local preconditions of a submission. Raises ValidationError on the first
    failure, otherwise returns the verification snapshot that was checked.
    Status and image hash are read from the same snapshot.
    """
    snap = verifier.result()
    if snap.status is not VerificationStatus.VERIFIED:
        raise ValidationError("Please upload an image with the verification token visible", field="media")
    for name in REQUIRED_FIELDS:
        if not (getattr(draft, name) or "").strip():
            raise ValidationError(f"{name} is required", field=name)
    if draft.work_type not in WORK_TYPES:
        raise ValidationError(f"Unknown work type: {draft.work_type}", field="work_type")
    if draft.media is None:
        raise ValidationError("Please upload a photo with the verification token", field="media")
    if draft.media.sha256 != snap.image_sha256:
        raise ValidationError("Attached media is not the verified proof image", field="media")
    return snap


class SubmissionGate:
    """The only path that persists a work submission."""

    def __init__(self, store: WorkStore):
        self.store = store

    def submit(self, draft: WorkDraft, verifier: ProofVerifier, user_id: Optional[str]) -> SubmissionResult:
        snap = validate_draft(draft, verifier)
        if not user_id:
            raise AuthenticationError("You must be logged in to submit your work")
        media = draft.media

        try:
            media_url = self.store.upload_media(user_id, media.data, media.extension, media.content_type)
            submission_id = self.store.insert_work({
                "user_id": user_id,
                "title": draft.title.strip(),
                "description": draft.description.strip(),
                "work_type": draft.work_type,
                "location": draft.location.strip(),
                "latitude": draft.latitude,
                "longitude": draft.longitude,
                "media_url": media_url,
                "media_type": media.media_type,
                "status": "pending",
                "benefit_points": BASE_BENEFIT_POINTS,
            })
        except Exception as e:
            logger.error("Work submission failed for %s: %s", user_id, e)
            raise SubmissionError(str(e) or "Failed to submit work") from e

        logger.info("Work submission %s stored for %s (verified by %s)",
                    submission_id, user_id, snap.matched_model)
        return SubmissionResult(submission_id=submission_id, media_url=media_url)
