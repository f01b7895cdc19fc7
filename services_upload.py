# services_upload.py — disk storage for uploaded files (contact attachments, booking/donation images, site images)
import os
import random
import time
from pathlib import Path

from flask import current_app
from werkzeug.utils import secure_filename

ALLOWED_FILE_TYPES = (
    # images
    "image/jpeg", "image/png", "image/gif", "image/webp", "image/svg+xml", "image/bmp", "image/tiff",
    # documents
    "application/pdf", "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "text/plain", "text/csv",
)
IMAGE_TYPES = tuple(t for t in ALLOWED_FILE_TYPES if t.startswith("image/"))

MAX_FILE_SIZE = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))  # 5 MB
MAX_FILES_PER_REQUEST = 5

INVALID_TYPE_MESSAGE = (
    "Invalid file type. Supported formats include: images (JPG, PNG, GIF, WebP, SVG, BMP, TIFF) "
    "and documents (PDF, DOC, DOCX, XLS, XLSX, PPT, PPTX, TXT, CSV)."
)

class UploadError(Exception):
    def __init__(self, error: str, message: str, status: int = 400):
        super().__init__(message)
        self.error = error
        self.message = message
        self.status = status

def upload_dir() -> Path:
    p = Path(current_app.config["UPLOAD_DIR"])
    p.mkdir(parents=True, exist_ok=True)
    return p

def unique_filename(original: str) -> str:
    """<epoch-millis>-<random 0..1e9><original extension>"""
    ext = os.path.splitext(secure_filename(original or ""))[1].lower()
    if len(ext) > 8:
        ext = ""
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"

def public_file_url(filename: str) -> str:
    return f"/uploads/{filename}"

def local_path_for_url(url: str):
    """Disk path of a /uploads/<name> URL, or None for anything else (external URLs)."""
    if not url or not url.startswith("/uploads/"):
        return None
    name = secure_filename(url[len("/uploads/"):])
    if not name:
        return None
    return upload_dir() / name

def validate_upload(fs, allowed=ALLOWED_FILE_TYPES) -> bytes:
    if fs is None or not fs.filename:
        raise UploadError("missing_file", "No file uploaded")
    if (fs.mimetype or "").lower() not in allowed:
        msg = INVALID_TYPE_MESSAGE if allowed is ALLOWED_FILE_TYPES else "Only image files are allowed"
        raise UploadError("invalid_file_type", msg)
    max_size = current_app.config.get("MAX_UPLOAD_BYTES", MAX_FILE_SIZE)
    data = fs.read(max_size + 1)
    if len(data) > max_size:
        raise UploadError("file_too_large", f"File exceeds the {max_size // (1024 * 1024)} MB limit", 413)
    if not data:
        raise UploadError("empty_file", "Uploaded file is empty")
    return data

def save_upload(fs, allowed=ALLOWED_FILE_TYPES) -> dict:
    """Validate and store one werkzeug FileStorage; returns the public record."""
    data = validate_upload(fs, allowed)
    fname = unique_filename(fs.filename)
    path = upload_dir() / fname
    with open(path, "wb") as f:
        f.write(data)
    current_app.logger.info("[UPLOAD] stored %s (%s, %d bytes)", fname, fs.mimetype, len(data))
    return {
        "url": public_file_url(fname),
        "filename": fname,
        "originalName": fs.filename,
        "size": len(data),
        "mimetype": fs.mimetype,
    }

def delete_upload(url: str) -> bool:
    path = local_path_for_url(url)
    if path is None or not path.exists():
        return False
    path.unlink()
    current_app.logger.info("[UPLOAD] removed %s", path.name)
    return True
