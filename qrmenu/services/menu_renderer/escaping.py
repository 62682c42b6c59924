from markupsafe import Markup

# Order matters: "&" first so the entities produced below are not re-escaped.
_HTML_REPLACEMENTS = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_html(value) -> str:
    """Escape user text for insertion into markup. ``None`` becomes an empty string."""
    if value is None:
        return ""
    text = str(value)
    for char, entity in _HTML_REPLACEMENTS:
        text = text.replace(char, entity)
    return text


def trusted_url(value) -> Markup:
    """
    Mark a URL-valued field as safe for attribute position.

    URLs are inserted as-is; validating them is the caller's job (logo, image,
    website, phone and e-mail targets are admin-entered).
    """
    return Markup(str(value))


def finalize(value):
    """Jinja ``finalize`` hook: every ``{{ ... }}`` output goes through here exactly once."""
    if isinstance(value, Markup):
        return value
    return escape_html(value)
