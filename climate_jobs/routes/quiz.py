from flask import Blueprint, request, jsonify
from climate_jobs.routes.work import bearer_token, json_body
from climate_jobs.services import supabase_client
from climate_jobs.services.quiz_grader import grade_module_attempt
from climate_jobs.utils.exceptions import AuthenticationError, ConfigurationError, ValidationError
from climate_jobs.utils.logger import get_logger


bp = Blueprint("quiz", __name__, url_prefix="/api/quiz")
logger = get_logger("quiz")


@bp.post("/module-attempts")
def module_attempt():
    """
    JSON: { courseId, moduleId, moduleName, answers: [int] }
    Header: Authorization: Bearer <user access token>
    """
    body = json_body()
    answers = body.get("answers")
    if not isinstance(answers, list):
        return jsonify({"error": "answers must be a list"}), 400
    try:
        user_id = supabase_client.current_user_id(bearer_token())
        attempt = grade_module_attempt(
            user_id,
            course_id=body.get("courseId"),
            module_id=body.get("moduleId"),
            module_name=body.get("moduleName") or "",
            answers=answers,
        )
    except AuthenticationError as e:
        return jsonify({"error": str(e)}), 401
    except ValidationError as e:
        return jsonify({"error": str(e), "field": e.field}), 400
    except ConfigurationError as e:
        return jsonify({"error": str(e)}), 503
    except Exception as e:
        logger.exception("Module attempt failed")
        return jsonify({"error": str(e)}), 500
    return jsonify(attempt.model_dump()), 201
