from flask import Blueprint, current_app, jsonify
from climate_jobs.services import llm_client, supabase_client
from climate_jobs.utils.config import HF_API_TOKEN, OCR_MODELS
from climate_jobs.utils.logger import get_logger


bp = Blueprint("health", __name__, url_prefix="/api/system")
logger = get_logger("health")


@bp.get("/health")
def health():
    status = {"flask": "ok", "supabase": "down", "llm": "not_configured", "ocr": "anonymous"}
    try:
        if supabase_client.is_configured() and supabase_client.supabase():
            status["supabase"] = "ok"
        else:
            status["supabase"] = "not_configured"
    except Exception as e:
        logger.warning("Supabase health check failed: %s", e)
        status["supabase"] = "down"
    if llm_client.is_configured():
        status["llm"] = "configured"
    if HF_API_TOKEN:
        status["ocr"] = "configured"
    status["ocr_models"] = list(OCR_MODELS)
    status["open_workflows"] = len(current_app.config["WORKFLOWS"])
    return jsonify(status), 200
