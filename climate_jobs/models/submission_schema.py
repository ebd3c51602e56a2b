from enum import Enum
from hashlib import sha256
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


WORK_TYPES = (
    "Tree Planting",
    "Clean Water",
    "Solar Installation",
    "Waste Management",
    "Community Garden",
    "Energy Audit",
    "Conservation",
    "Other",
)

BASE_BENEFIT_POINTS = 10


class VerificationStatus(str, Enum):
    IDLE = "idle"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    NOT_VERIFIED = "not_verified"


class RecognitionAttempt(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_id: str
    text: str = ""
    digits: str = ""
    matched: bool = False
    error: Optional[str] = Field(None, description="set when the model failed or timed out")


class VerificationResult(BaseModel):
    status: VerificationStatus
    token: str
    run_id: int = 0
    matched_model: Optional[str] = None
    matched_text: Optional[str] = None
    image_sha256: Optional[str] = None
    attempts: list[RecognitionAttempt] = Field(default_factory=list)


class ProofMedia(BaseModel):
    data: bytes = Field(repr=False)
    filename: str = "proof.jpg"
    content_type: str = "image/jpeg"

    @property
    def sha256(self) -> str:
        return sha256(self.data).hexdigest()

    @property
    def extension(self) -> str:
        if "." in self.filename:
            return self.filename.rsplit(".", 1)[-1].lower()
        return self.content_type.split("/")[-1] or "bin"

    @property
    def media_type(self) -> str:
        return "video" if self.content_type.startswith("video") else "image"


class WorkDraft(BaseModel):
    title: str = ""
    description: str = ""
    work_type: str = ""
    location: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    media: Optional[ProofMedia] = None


class SubmissionResult(BaseModel):
    submission_id: str
    media_url: Optional[str] = None
    status: str = "pending"
    benefit_points: int = BASE_BENEFIT_POINTS
