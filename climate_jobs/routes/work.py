import asyncio
from flask import Blueprint, current_app, request, jsonify
from pydantic import ValidationError as SchemaError

from climate_jobs.models.submission_schema import ProofMedia, WorkDraft
from climate_jobs.services import supabase_client
from climate_jobs.services.submission_gate import SubmissionGate, validate_draft
from climate_jobs.services.verification import validate_proof_image
from climate_jobs.services.workflow_registry import WorkflowRegistry
from climate_jobs.utils.exceptions import (
    AuthenticationError,
    ConfigurationError,
    SubmissionError,
    ValidationError,
)
from climate_jobs.utils.logger import get_logger


bp = Blueprint("work", __name__, url_prefix="/api/work")
logger = get_logger("work")


def _workflows() -> WorkflowRegistry:
    return current_app.config["WORKFLOWS"]


def _gate() -> SubmissionGate:
    return current_app.config["SUBMISSION_GATE"]


def bearer_token() -> str | None:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.removeprefix("Bearer ").strip() or None


def json_body() -> dict:
    """The request's JSON object, or {} when the body is anything else."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _not_found(workflow_id: str):
    return jsonify({"error": f"unknown verification workflow: {workflow_id}"}), 404


@bp.post("/verifications")
def create_verification():
    """Start a workflow; the returned token must appear in the proof photo."""
    wf = _workflows().create()
    return jsonify({"workflow_id": wf.id, "token": wf.verifier.token, "status": wf.verifier.status.value}), 201


@bp.get("/verifications/<workflow_id>")
def get_verification(workflow_id: str):
    wf = _workflows().get(workflow_id)
    if not wf:
        return _not_found(workflow_id)
    return jsonify(wf.verifier.result().model_dump(mode="json")), 200


@bp.post("/verifications/<workflow_id>/proof")
def upload_proof(workflow_id: str):
    """
    multipart/form-data with ``file``: the photo showing the token.
    Runs the configured models in order until one reads the token.
    """
    wf = _workflows().get(workflow_id)
    if not wf:
        return _not_found(workflow_id)
    f = request.files.get("file")
    if not f:
        return jsonify({"error": "file is required"}), 400
    data = f.read()
    try:
        validate_proof_image(data, f.mimetype)
    except ValidationError as e:
        return jsonify({"error": str(e), "field": e.field}), 400

    _workflows().attach_media(workflow_id, ProofMedia(
        data=data, filename=f.filename or "proof.jpg", content_type=f.mimetype,
    ))
    result = asyncio.run(wf.verifier.supply_image(data))
    return jsonify(result.model_dump(mode="json")), 200


@bp.post("/verifications/<workflow_id>/submit")
def submit_work(workflow_id: str):
    """
    JSON: { title, description, work_type, location, latitude?, longitude? }
    Header: Authorization: Bearer <user access token>
    The verified proof photo is attached as the submission's media.
    """
    wf = _workflows().get(workflow_id)
    if not wf:
        return _not_found(workflow_id)
    body = json_body()
    try:
        draft = WorkDraft.model_validate({**body, "media": wf.media})
    except SchemaError as e:
        return jsonify({"error": "invalid submission", "details": e.errors(include_url=False, include_context=False, include_input=False)}), 400

    try:
        # Local checks first: an unverified draft never reaches auth or storage.
        validate_draft(draft, wf.verifier)
        user_id = supabase_client.current_user_id(bearer_token())
        result = _gate().submit(draft, wf.verifier, user_id)
    except AuthenticationError as e:
        return jsonify({"error": str(e)}), 401
    except ValidationError as e:
        return jsonify({"error": str(e), "field": e.field}), 400
    except ConfigurationError as e:
        logger.error("Submission unavailable: %s", e)
        return jsonify({"error": str(e)}), 503
    except SubmissionError as e:
        return jsonify({"error": str(e)}), 502

    _workflows().discard(workflow_id)
    return jsonify(result.model_dump()), 201
