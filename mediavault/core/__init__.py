from .errors import GatewayError, InvalidInput, StreamAborted, UpstreamFailure

__all__ = ["GatewayError", "InvalidInput", "StreamAborted", "UpstreamFailure"]
