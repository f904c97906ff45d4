"""
api.routes_import - start an import, poll its job record.
"""

from flask import request, jsonify

from api import api_bp
from db import get_session
from import_engine import start_import
from services.job_service import JobService


@api_bp.route("/<type_name>/import", methods=["POST"])
def api_start_import(type_name):
    """
    POST /api/v1/<type>/import

    Multipart: field name 'file' (Content-Type text/csv).
    Responds 202 once the file is staged; processing continues in
    the background.  Poll /api/v1/imports/<job_id> for the outcome.
    """
    f = request.files.get("file")
    if not f:
        return jsonify({"error": "no file in upload"}), 400

    result = start_import(type_name, f)
    return jsonify(result.to_dict()), 202


@api_bp.route("/imports/<int:job_id>")
def api_import_status(job_id):
    """GET /api/v1/imports/<job_id> - the job record with its audit trail."""
    session = get_session()
    try:
        job = JobService.find_by_id(session, job_id)
        if job is None:
            return jsonify({"error": "not found"}), 404
        return jsonify(job.to_dict())
    finally:
        session.close()
