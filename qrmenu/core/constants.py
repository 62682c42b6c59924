import os

# 📁 Upload sub-folders under settings.upload_root
UPLOAD_KINDS = ("logos", "items", "qrcodes")

MAX_UPLOAD_SIZE = 5 * 1024 * 1024  # 5MB
ALLOWED_IMAGE_EXTS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}

# Schema-level defaults for new cafés (the renderer has its own fallbacks)
DEFAULT_CURRENCY = "₹"
DEFAULT_CATEGORY_ICON = "🍽️"
DEFAULT_THEME = {
    "primary_color": "#2C5F2D",
    "secondary_color": "#97BC62",
    "accent_color": "#DAA520",
    "background_color": "#FDFBF7",
    "text_color": "#2D3436",
}


def ensure_upload_dirs(upload_root: str) -> None:
    for kind in UPLOAD_KINDS:
        os.makedirs(os.path.join(upload_root, kind), exist_ok=True)
