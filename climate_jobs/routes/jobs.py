from flask import Blueprint, request, jsonify
from climate_jobs.routes.work import json_body
from climate_jobs.services.job_recommender import recommend_jobs, user_skills
from climate_jobs.utils.logger import get_logger


bp = Blueprint("jobs", __name__, url_prefix="/api/jobs")
logger = get_logger("jobs")


@bp.post("/recommend")
def recommend():
    """
    JSON: { userId, jobs: [{title, skills[], difficulty, type, ...}] }
    Returns the same jobs ordered by fit, each with recommendationScore and matchedSkills.
    """
    body = json_body()
    user_id = body.get("userId")
    jobs = body.get("jobs") or []
    if not user_id:
        return jsonify({"error": "User ID is required"}), 400

    try:
        skills = user_skills(user_id)
    except Exception as e:
        logger.error("Error fetching user skills: %s", e)
        return jsonify({"error": "Failed to fetch user skills"}), 500

    try:
        ranked = recommend_jobs(user_id, jobs, skills=skills)
    except Exception as e:
        logger.exception("Error in recommend-jobs")
        return jsonify({"error": str(e)}), 500
    return jsonify({"jobs": ranked}), 200
