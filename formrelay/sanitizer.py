import re


def normalize(value) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def escape(value) -> str:
    """Normalizes and escapes the markup characters of a value for HTML descriptions."""
    return (
        normalize(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def slugify(value) -> str:
    return re.sub(r"\s+", "-", normalize(value).lower())
