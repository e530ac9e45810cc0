class GatewayError(Exception):
    """
    Error rendered as the JSON envelope {success: false, error, message}.
    `error` is the short label, `message` the diagnostic detail.
    """
    status_code = 500

    def __init__(self, error: str, message: str = ""):
        super().__init__(message or error)
        self.error = error
        self.message = message

class InvalidInput(GatewayError):
    """Missing or malformed client input"""
    status_code = 400

class UpstreamFailure(GatewayError):
    """yt-dlp could not be run or its output could not be used"""
    status_code = 500

class StreamAborted(Exception):
    """
    yt-dlp failed after response headers were committed.
    Deliberately not a GatewayError: no handler may try to render it,
    the connection simply ends.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
