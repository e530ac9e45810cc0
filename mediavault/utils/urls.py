from urllib.parse import urlparse
from mediavault.config.settings import config

YOUTUBE_MARKERS = ("youtube.com", "youtu.be")

def is_youtube_url(url) -> bool:
    """Substring check, as loose as the clients expect"""
    return isinstance(url, str) and any(marker in url for marker in YOUTUBE_MARKERS)

def safe_url_for_log(url: str) -> str:
    """Safe URL for logging"""
    try:
        parsed = urlparse(url)
    except ValueError:
        return "invalid_url"

    base_url = f"{parsed.scheme}://{parsed.netloc}{parsed.path}"
    if parsed.query:
        if config.logging.level == "DEBUG":
            return f"{base_url}?{parsed.query}"
        return f"{base_url}?..."
    return base_url
