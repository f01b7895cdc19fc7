# routes_uploads.py — generic uploads (contact attachments, event/donation images) and serving them back
from flask import Blueprint, request, jsonify, send_from_directory
from extensions import limiter
from defense import FORM_LIMIT
from services_upload import (
    save_upload, delete_upload, upload_dir, UploadError, MAX_FILES_PER_REQUEST,
)

bp_uploads = Blueprint("uploads", __name__)

def _upload_error(e: UploadError):
    return jsonify(ok=False, error=e.error, message=e.message), e.status

@bp_uploads.post("/api/upload")
@limiter.limit(FORM_LIMIT)
def upload_one():
    fs = request.files.get("file")
    try:
        rec = save_upload(fs)
    except UploadError as e:
        return _upload_error(e)
    return jsonify(ok=True, **rec), 201

@bp_uploads.post("/api/upload/multiple")
@limiter.limit(FORM_LIMIT)
def upload_many():
    files = [f for f in request.files.getlist("files") if f and f.filename]
    if not files:
        return jsonify(ok=False, error="missing_file", message="No files uploaded"), 400
    if len(files) > MAX_FILES_PER_REQUEST:
        return jsonify(ok=False, error="too_many_files",
                       message=f"At most {MAX_FILES_PER_REQUEST} files per request"), 400
    out = []
    for fs in files:
        try:
            out.append(save_upload(fs))
        except UploadError as e:
            # all or nothing: drop what this request already stored
            for rec in out:
                delete_upload(rec["url"])
            return _upload_error(e)
    return jsonify(ok=True, files=out), 201

@bp_uploads.get("/uploads/<path:name>")
def serve_upload(name):
    return send_from_directory(upload_dir(), name)
