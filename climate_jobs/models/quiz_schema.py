from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Question(BaseModel):
    question: str = Field(..., min_length=1)
    options: list[str]
    correct_answer: int = Field(..., ge=0, le=3)

    @field_validator("options")
    @classmethod
    def four_options(cls, v: list[str]) -> list[str]:
        if len(v) != 4:
            raise ValueError(f"expected 4 options, got {len(v)}")
        return v


class JobRanking(BaseModel):
    jobIndex: int
    score: float = 0
    matchedSkills: list[str] = Field(default_factory=list)


class ModuleAttempt(BaseModel):
    user_id: str
    course_id: str
    module_id: str
    score: int
    total_questions: int
    percentage: float
    passed: bool
    certificate_number: Optional[str] = None
