import pytest

from mediavault.utils.filename import attachment_filename, sanitize_title


@pytest.mark.parametrize("title, expected", [
    ("Cool Video! #1", "Cool_Video_1"),
    ("My Cool Clip!", "My_Cool_Clip"),
    ("already_safe_name", "already_safe_name"),
    ("tabs\tand\nnewlines   here", "tabs_and_newlines_here"),
    ('quote " and / slash', "quote_and_slash"),
    ("Ünïcödé – title", "ncd_title"),
])
def test_sanitize_title(title, expected):
    assert sanitize_title(title) == expected


@pytest.mark.parametrize("title", [
    "Cool Video! #1",
    "  leading and trailing  ",
    "emoji 🎬 clip (official) [4K]",
    "a_b c__d",
    "",
])
def test_sanitize_title_is_idempotent(title):
    once = sanitize_title(title)
    assert sanitize_title(once) == once


def test_attachment_filename_falls_back_when_nothing_survives():
    assert attachment_filename("!!!", "mp4") == "video.mp4"
    assert attachment_filename(None, "mp3") == "video.mp3"
    assert attachment_filename("My Cool Clip!", "mp3") == "My_Cool_Clip.mp3"
