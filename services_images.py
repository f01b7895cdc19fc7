# services_images.py — image inspection for the site image library
from PIL import Image, UnidentifiedImageError

RASTER_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp", "image/bmp", "image/tiff")

def image_dimensions(path, mimetype: str = None):
    """(width, height) of a stored raster image, (None, None) for SVG or unreadable files."""
    if mimetype and mimetype not in RASTER_TYPES:
        return None, None
    try:
        with Image.open(path) as im:
            w, h = im.size
        return int(w), int(h)
    except (UnidentifiedImageError, OSError):
        return None, None
