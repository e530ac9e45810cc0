from fastapi import APIRouter, Request
from mediavault.models.request import InfoRequest
from mediavault.models.response import VideoDetails
from mediavault.services.info import VideoInfoService, build_video_details
from mediavault.core.errors import InvalidInput, UpstreamFailure
from mediavault.core.logging import log_info, log_error
from mediavault.utils.urls import is_youtube_url, safe_url_for_log

router = APIRouter()

@router.post("/info", response_model=VideoDetails)
async def get_video_info(request: Request, info_request: InfoRequest):
    """Get video metadata and up to five muxed formats"""

    url = info_request.url
    if not is_youtube_url(url):
        raise InvalidInput("Invalid YouTube URL", "url must point to youtube.com or youtu.be")

    log_info(request, f"Fetching info for: {safe_url_for_log(url)}")

    result = await VideoInfoService.fetch(url)
    if not result.ok:
        log_error(request, f"Info error: {result.error.message}")
        raise UpstreamFailure("Failed to fetch video information", result.error.message)

    details = build_video_details(result.metadata)
    log_info(request, f"Info retrieved: {details.title!r} ({len(details.formats)} formats)")
    return details
