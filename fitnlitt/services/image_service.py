import io
import re
import time
from PIL import Image as PILImage

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MB

# Pillow format → (content type, file extension)
FORMATS = {
    "JPEG": ("image/jpeg", "jpg"),
    "PNG": ("image/png", "png"),
    "WEBP": ("image/webp", "webp"),
    "GIF": ("image/gif", "gif"),
}


def validate_image(image_bytes, max_size=MAX_FILE_SIZE):
    """Validate and sanitize an uploaded image.

    - Checks file size
    - Verifies it's a real image via Pillow
    - Strips EXIF data by re-encoding in the original format

    Returns:
        (sanitized bytes, content type)

    Raises:
        ValueError on invalid input
    """
    if not image_bytes:
        raise ValueError("Empty file")
    if len(image_bytes) > max_size:
        raise ValueError(f"Image too large: {len(image_bytes)} bytes (max {max_size})")

    try:
        img = PILImage.open(io.BytesIO(image_bytes))
        img.verify()  # verify it's a real image
    except Exception:
        raise ValueError("Invalid image file")

    # Re-open (verify() closes the file) and re-encode to strip EXIF
    img = PILImage.open(io.BytesIO(image_bytes))
    fmt = img.format
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported image format: {fmt}")

    if fmt == "JPEG" and img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    buffer = io.BytesIO()
    save_kwargs = {"quality": 90} if fmt in ("JPEG", "WEBP") else {}
    img.save(buffer, format=fmt, **save_kwargs)
    return buffer.getvalue(), FORMATS[fmt][0]


def safe_filename(original_name, now=None):
    """``<epoch-ms>-<name>`` with anything but ``[a-zA-Z0-9.-]`` replaced."""
    timestamp = int((now if now is not None else time.time()) * 1000)
    cleaned = re.sub(r"[^a-zA-Z0-9.-]", "_", original_name or "image")
    return f"{timestamp}-{cleaned}"


def extension_for(content_type):
    """File extension for a response content type (``image/jpeg`` → ``jpg``)."""
    subtype = (content_type or "image/jpeg").split("/")[-1].split(";")[0].strip()
    return subtype.replace("jpeg", "jpg") or "jpg"
