import re

_NON_WORD = re.compile(r'[^\w\s]', re.ASCII)
_WHITESPACE = re.compile(r'\s+', re.ASCII)


def sanitize_title(title: str) -> str:
    """
    Turn a video title into a header-safe file stem.
    Drops everything but ASCII word characters and whitespace, then
    collapses whitespace runs to "_". Applying it twice changes nothing.
    """
    stripped = _NON_WORD.sub('', title)
    return _WHITESPACE.sub('_', stripped)


def attachment_filename(title: str, ext: str, fallback: str = "video") -> str:
    stem = sanitize_title(title or "") or fallback
    return f"{stem}.{ext}"
