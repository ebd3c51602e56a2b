from functools import partial
from typing import Optional

from flask import Flask, jsonify
from climate_jobs.routes.health import bp as health_bp
from climate_jobs.routes.jobs import bp as jobs_bp
from climate_jobs.routes.questions import bp as questions_bp
from climate_jobs.routes.quiz import bp as quiz_bp
from climate_jobs.routes.work import bp as work_bp
from climate_jobs.services.submission_gate import SubmissionGate, WorkStore
from climate_jobs.services.supabase_client import SupabaseWorkStore
from climate_jobs.services.text_recognizer import HuggingFaceRecognizer, TextRecognizer
from climate_jobs.services.verification import ProofVerifier
from climate_jobs.services.workflow_registry import WorkflowRegistry
from climate_jobs.utils.config import HOST, PORT, FLASK_ENV, OCR_MODELS, OCR_TIMEOUT_SECONDS
from climate_jobs.utils.logger import get_logger, quiet_http_libraries


logger = get_logger("server")


def create_app(
    recognizer: Optional[TextRecognizer] = None,
    store: Optional[WorkStore] = None,
    models: tuple[str, ...] = OCR_MODELS,
) -> Flask:
    quiet_http_libraries()
    app = Flask(__name__)
    app.config["WORKFLOWS"] = WorkflowRegistry(partial(
        ProofVerifier,
        recognizer or HuggingFaceRecognizer(),
        models,
        OCR_TIMEOUT_SECONDS,
    ))
    app.config["SUBMISSION_GATE"] = SubmissionGate(store or SupabaseWorkStore())

    app.register_blueprint(health_bp)
    app.register_blueprint(work_bp)
    app.register_blueprint(questions_bp)
    app.register_blueprint(jobs_bp)
    app.register_blueprint(quiz_bp)


    @app.get("/")
    def root():
        return jsonify({"service": "climate-jobs", "env": FLASK_ENV})


    return app


app = create_app()


if __name__ == "__main__":
    logger.info("Starting climate-jobs on %s:%s (%s)", HOST, PORT, FLASK_ENV)
    app.run(host=HOST, port=PORT)
