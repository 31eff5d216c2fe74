import base64
import mimetypes
import os

COURSE_FIELDS = ("title", "description")
POST_FIELDS = ("title", "imageUrl", "description")


def _trimmed(values, fields):
    return {name: str(values.get(name) or "").strip() for name in fields}


def clean_course_form(values):
    """Return the trimmed course fields, or None when the title is missing."""
    cleaned = _trimmed(values, COURSE_FIELDS)
    if not cleaned["title"]:
        return None
    return cleaned


def clean_post_form(values):
    """Return the trimmed post fields, or None when any of them is missing."""
    cleaned = _trimmed(values, POST_FIELDS)
    if not all(cleaned.values()):
        return None
    return cleaned


def image_to_data_url(path: str) -> str:
    mime, _ = mimetypes.guess_type(path)
    if not mime or not mime.startswith("image/"):
        raise ValueError(f"{path} is not an image file")
    with open(path, "rb") as f:
        encoded = base64.b64encode(f.read()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def resolve_image(value: str) -> str:
    # Links and inline data are stored as given; anything else is a local file
    value = value.strip()
    if not value or value.startswith(("http://", "https://", "data:")):
        return value
    return image_to_data_url(os.path.expanduser(value))
