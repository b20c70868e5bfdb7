class MatchingError(Exception):
    pass


class UpstreamError(MatchingError):
    """
    The gig/worker directory could not be reached or returned something unusable.
    The message is shown to the caller as-is.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GigNotFound(UpstreamError):
    pass


class OracleError(MatchingError):
    """
    Any failure of the delegated scorer. Never surfaced to callers:
    it only selects the fallback scorer.

    kind is one of: timeout, transport, status, malformed, empty, rejected, cancelled
    """

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
