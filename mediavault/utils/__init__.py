from .filename import attachment_filename, sanitize_title
from .urls import is_youtube_url, safe_url_for_log

__all__ = ["attachment_filename", "is_youtube_url", "safe_url_for_log", "sanitize_title"]
