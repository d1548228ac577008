class ProxyError(Exception):
    """Failure that maps to a JSON ``{"error": ...}`` response."""

    status_code = 500

    def __init__(self, message: str, headers: dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.headers = headers or {}


class ConfigurationError(ProxyError):
    status_code = 500


class ValidationError(ProxyError):
    status_code = 400


class MethodNotAllowedError(ProxyError):
    status_code = 405

    def __init__(self, method: str, allowed: tuple[str, ...]):
        super().__init__(f"Method {method} not allowed.", headers={"Allow": ", ".join(allowed)})


class BackendError(ProxyError):
    """Anything that went wrong while talking to Gemini."""

    status_code = 500
    prefix = "Backend error: "

    def __init__(self, message: str):
        super().__init__(f"{self.prefix}{message}")
        self.detail = message


class UpstreamError(BackendError):
    def __init__(self, upstream_status: int, body_text: str):
        super().__init__(f"Gemini API responded with status {upstream_status}: {body_text}")
        self.upstream_status = upstream_status
        self.body_text = body_text


class UpstreamShapeError(BackendError):
    def __init__(self, detail: str):
        super().__init__(f"Unexpected Gemini response shape: {detail}")


class UnexpectedError(BackendError):
    pass
