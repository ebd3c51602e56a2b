from flask import Blueprint, request, jsonify
from climate_jobs.routes.work import json_body
from climate_jobs.services.question_generator import generate_questions
from climate_jobs.utils.exceptions import QuestionGenerationError
from climate_jobs.utils.logger import get_logger


bp = Blueprint("questions", __name__, url_prefix="/api/questions")
logger = get_logger("questions")


def _generate(scope: str, name_key: str, default_count: int):
    body = json_body()
    name = body.get(name_key) or body.get("name")
    try:
        num_questions = int(body.get("numQuestions", default_count))
        if not name:
            raise QuestionGenerationError(f"{name_key} is required")
        questions = generate_questions(
            scope,
            name=name,
            num_questions=num_questions,
            course_id=body.get("courseId"),
            module_id=body.get("moduleId"),
        )
    except (QuestionGenerationError, ValueError) as e:
        logger.error("Error generating %s questions: %s", scope, e)
        return jsonify({"success": False, "error": str(e)}), 500

    return jsonify({
        "success": True,
        "questions": [q.model_dump() for q in questions],
        "message": f"Generated {len(questions)} {'certification ' if scope == 'course' else ''}questions for {name}",
    }), 200


@bp.post("/course")
def course_questions():
    """JSON: { courseId, courseName, numQuestions=10 }"""
    return _generate("course", "courseName", 10)


@bp.post("/module")
def module_questions():
    """JSON: { courseId, moduleId, moduleName, numQuestions=5 }"""
    return _generate("module", "moduleName", 5)
