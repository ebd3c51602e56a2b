import time
from typing import Any, Callable, Optional, Sequence

from climate_jobs.models.quiz_schema import ModuleAttempt
from climate_jobs.services import supabase_client
from climate_jobs.utils.exceptions import AuthenticationError, ValidationError
from climate_jobs.utils.logger import get_logger


logger = get_logger("quiz-grader")

PASS_PERCENTAGE = 80


def certificate_number(course_id: str, module_id: str, user_id: str) -> str:
    return f"GP-M-{course_id}-{module_id}-{user_id[:8]}-{int(time.time() * 1000)}"


def score_answers(questions: Sequence[dict[str, Any]], answers: Sequence[int]) -> int:
    return sum(
        1 for i, q in enumerate(questions)
        if i < len(answers) and answers[i] == q.get("correct_answer")
    )


def grade_module_attempt(
    user_id: Optional[str],
    course_id: Any,
    module_id: Any,
    module_name: str,
    answers: Sequence[int],
    load: Optional[Callable[[str, dict[str, Any]], list[dict[str, Any]]]] = None,
    store: Optional[Callable[[str, Any], Any]] = None,
) -> ModuleAttempt:
    """Score a module test, record the attempt and issue a certificate on a pass."""
    if not user_id:
        raise AuthenticationError("You must be logged in to submit a test")
    load = load or supabase_client.select_rows
    store = store or supabase_client.insert_row

    questions = load("module_test_questions", {"course_id": course_id, "module_id": module_id})
    if not questions:
        raise ValidationError("No test questions for this module", field="module_id")

    score = score_answers(questions, answers)
    percentage = score / len(questions) * 100
    attempt = ModuleAttempt(
        user_id=user_id,
        course_id=str(course_id),
        module_id=str(module_id),
        score=score,
        total_questions=len(questions),
        percentage=percentage,
        passed=percentage >= PASS_PERCENTAGE,
    )
    store("module_test_attempts", attempt.model_dump(exclude={"certificate_number"}))

    if attempt.passed:
        attempt.certificate_number = certificate_number(attempt.course_id, attempt.module_id, user_id)
        store("module_certificates", {
            "user_id": user_id,
            "course_id": course_id,
            "module_id": module_id,
            "module_name": module_name,
            "certificate_number": attempt.certificate_number,
        })
        logger.info("Certificate %s issued", attempt.certificate_number)

    logger.info("Module %s attempt by %s: %d/%d (%s)", module_id, user_id, score,
                len(questions), "passed" if attempt.passed else "failed")
    return attempt
