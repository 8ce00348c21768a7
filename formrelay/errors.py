class RelayError(Exception):
    """Base exception for the form relay."""


class ConfigError(RelayError):
    pass


class FormValidationError(RelayError):
    """A submission failed its required-field policy (400)."""

    def __init__(self, kind: str, fields: list[str] | None = None):
        self.kind = kind
        self.fields = fields or []
        super().__init__(f"{kind}: {', '.join(self.fields)}" if self.fields else kind)


class ConsentError(FormValidationError):
    def __init__(self):
        super().__init__("consent_required")


class UpstreamError(RelayError):
    """Freshdesk answered a write call with a non-success status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Freshdesk error {status_code}: {body}")


class RateLimitExceeded(RelayError):
    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded, retry after {retry_after}s")
