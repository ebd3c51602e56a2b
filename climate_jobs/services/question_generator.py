"""
question_generator.py – LLM-generated multiple choice questions

Builds a prompt for a course certification test or a single module quiz,
asks the chat model for a JSON array, validates it and stores the rows.
"""

from typing import Any, Callable, Optional

from pydantic import ValidationError as SchemaError

from climate_jobs.models.quiz_schema import Question
from climate_jobs.services import llm_client, supabase_client
from climate_jobs.utils.exceptions import ConfigurationError, QuestionGenerationError
from climate_jobs.utils.logger import get_logger


logger = get_logger("question-generator")


SYSTEM_PROMPT = (
    "You are an expert educational content creator specializing in climate action and "
    "environmental sustainability. Generate high-quality %(kind)s questions in valid JSON format only."
)

COURSE_PROMPT = """Generate %(count)d multiple choice questions for a comprehensive certification test for the course "%(name)s" in climate action and sustainability.

Each question should:
- Test comprehensive understanding of the entire course
- Be practical and scenario-based (real-world situations)
- Have 4 answer options
- Include only one correct answer
- Cover different aspects of the course topic
- Be clear and professional

%(format)s"""

MODULE_PROMPT = """Generate %(count)d multiple choice questions for a climate action course module titled "%(name)s".

Each question should:
- Be practical and scenario-based (real-world situations)
- Have 4 answer options
- Include only one correct answer
- Test understanding and application of concepts
- Be clear and concise

%(format)s"""

ANSWER_FORMAT = """Return ONLY a valid JSON array in this exact format:
[
  {
    "question": "Question text here",
    "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
    "correct_answer": 0
  }
]

The correct_answer should be the index (0-3) of the correct option."""


# scope → (prompt, system kind, table, max_tokens)
SCOPES = {
    "course": (COURSE_PROMPT, "certification exam", "test_questions", 3000),
    "module": (MODULE_PROMPT, "assessment", "module_test_questions", 2000),
}

Chat = Callable[..., str]


def parse_questions(text: str) -> list[Question]:
    try:
        items = llm_client.extract_json_array(text)
        return [Question.model_validate(q) for q in items]
    except (ValueError, SchemaError) as e:
        logger.error("Failed to parse generated questions: %s", e)
        raise QuestionGenerationError("Failed to parse generated questions") from e


def generate_questions(
    scope: str,
    name: str,
    num_questions: int,
    course_id: Any,
    module_id: Any = None,
    chat: Optional[Chat] = None,
    store: Optional[Callable[[str, list[dict[str, Any]]], Any]] = None,
) -> list[Question]:
    """Generate, validate and store questions for a course or a module."""
    if scope not in SCOPES:
        raise ValueError(f"unknown question scope: {scope}")
    if num_questions < 1:
        raise QuestionGenerationError("numQuestions must be at least 1")
    template, kind, table, max_tokens = SCOPES[scope]
    chat = chat or llm_client.chat
    store = store or supabase_client.insert_row

    logger.info("Generating %d %s questions for: %s", num_questions, scope, name)
    prompt = template % {"count": num_questions, "name": name, "format": ANSWER_FORMAT}
    try:
        text = chat(SYSTEM_PROMPT % {"kind": kind}, prompt, temperature=0.7, max_tokens=max_tokens)
    except ConfigurationError as e:
        raise QuestionGenerationError(str(e)) from e
    except Exception as e:
        logger.error("LLM request failed: %s", e)
        raise QuestionGenerationError(f"LLM API error: {e}") from e
    logger.debug("Generated text: %s", text)

    questions = parse_questions(text)

    rows = []
    for q in questions:
        row = {"course_id": course_id, **q.model_dump()}
        if scope == "module":
            row["module_id"] = module_id
        rows.append(row)
    try:
        store(table, rows)
    except Exception as e:
        logger.error("Database insert error: %s", e)
        raise QuestionGenerationError("Failed to store questions in database") from e

    logger.info("Stored %d %s questions in %s", len(questions), scope, table)
    return questions
