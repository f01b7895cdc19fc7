# routes_site_images.py — image library used by the public pages (hero, gallery, rooms...)
from flask import Blueprint, request, jsonify, current_app
from extensions import db
from guards import admin_required
from models_uploads import SiteImage
from schemas import SiteImageIn, SiteImageUpdateIn, parse_body
from services_images import image_dimensions
from services_upload import save_upload, delete_upload, local_path_for_url, UploadError, IMAGE_TYPES

bp_site_images = Blueprint("site_images", __name__)

@bp_site_images.get("/api/site-images")
def list_site_images():
    q = SiteImage.query
    category = (request.args.get("category") or "").strip()
    if category:
        q = q.filter(SiteImage.category == category)
    rows = q.order_by(SiteImage.created_at.desc(), SiteImage.id.desc()).all()
    return jsonify(ok=True, images=[r.to_dict() for r in rows])

@bp_site_images.post("/api/admin/site-images")
@admin_required
def admin_create_site_image():
    # JSON: {name, imageUrl, category, description} pointing at a file from /api/upload
    if request.is_json:
        data = parse_body(SiteImageIn)
        path = local_path_for_url(data.image_url)
        if path is None or not path.exists():
            return jsonify(ok=False, error="bad_image_url", message=f"Unknown image {data.image_url}"), 400
        name, category, description, url = data.name, data.category, data.description, data.image_url
        w, h = image_dimensions(path)
    else:
        name = (request.form.get("name") or "").strip()
        category = (request.form.get("category") or "").strip()
        description = (request.form.get("description") or "").strip() or None
        if not name or not category:
            return jsonify(ok=False, error="missing_fields", message="name and category are required"), 400

        fs = request.files.get("image")
        try:
            rec = save_upload(fs, allowed=IMAGE_TYPES)
        except UploadError as e:
            return jsonify(ok=False, error=e.error, message=e.message), e.status
        url = rec["url"]
        w, h = image_dimensions(local_path_for_url(url), rec["mimetype"])

    img = SiteImage(name=name, category=category, description=description,
                    image_url=url, width=w, height=h)
    db.session.add(img); db.session.commit()
    current_app.logger.info("[SITE_IMAGES] created id=%s %s (%sx%s)", img.id, url, w, h)
    return jsonify(ok=True, image=img.to_dict()), 201

@bp_site_images.put("/api/admin/site-images/<int:image_id>")
@admin_required
def admin_update_site_image(image_id: int):
    img = db.session.get(SiteImage, image_id)
    if not img:
        return jsonify(ok=False, error="image_not_found"), 404
    data = parse_body(SiteImageUpdateIn)
    old_url = None
    if data.image_url and data.image_url != img.image_url:
        path = local_path_for_url(data.image_url)
        if path is None or not path.exists():
            return jsonify(ok=False, error="bad_image_url", message=f"Unknown image {data.image_url}"), 400
        old_url, img.image_url = img.image_url, data.image_url
        img.width, img.height = image_dimensions(path)
    for field in ("name", "description", "category"):
        if field in data.model_fields_set and (field == "description" or getattr(data, field)):
            setattr(img, field, getattr(data, field))
    db.session.commit()
    if old_url:
        delete_upload(old_url)
    return jsonify(ok=True, image=img.to_dict())

@bp_site_images.delete("/api/admin/site-images/<int:image_id>")
@admin_required
def admin_delete_site_image(image_id: int):
    img = db.session.get(SiteImage, image_id)
    if not img:
        return jsonify(ok=False, error="image_not_found"), 404
    url = img.image_url
    db.session.delete(img); db.session.commit()
    # only files this server stored; external URLs are left alone
    removed = delete_upload(url)
    return jsonify(ok=True, message="Image deleted", fileRemoved=removed)
