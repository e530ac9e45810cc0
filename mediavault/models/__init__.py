from .internal import FormatDescriptor, MediaKind, MediaMetadata, MetadataResult, UpstreamError
from .request import InfoRequest
from .response import ErrorResponse, FormatEntry, HealthStatus, ServiceStatus, VideoDetails

__all__ = [
    "ErrorResponse", "FormatDescriptor", "FormatEntry", "HealthStatus", "InfoRequest",
    "MediaKind", "MediaMetadata", "MetadataResult", "ServiceStatus", "UpstreamError", "VideoDetails",
]
