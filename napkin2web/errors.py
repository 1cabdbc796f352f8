"""
Error taxonomy for sketch-to-code requests.

Every error carries the HTTP status the API layer answers with and a short
``kind`` tag used in task outcomes.
"""


class Napkin2WebError(Exception):
    """Base class for all expected request failures."""

    status_code = 500
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ContentRejectedError(Napkin2WebError):
    """The uploaded image is not a hand-drawn UI sketch."""

    status_code = 400
    kind = "content_rejected"


class ProviderTransientError(Napkin2WebError):
    """A single candidate model failed; the next candidate may succeed."""

    kind = "provider_transient"

    def __init__(self, message: str, model_name: str = "", rate_limited: bool = False):
        super().__init__(message)
        self.model_name = model_name
        self.rate_limited = rate_limited


class ProviderExhaustedError(Napkin2WebError):
    """Every candidate model failed."""

    kind = "provider_exhausted"


class ConfigurationError(Napkin2WebError):
    """The service is missing required configuration, e.g. an API key."""

    kind = "configuration"


class ClientInputError(Napkin2WebError):
    """The request is missing a required field or carries an invalid one."""

    status_code = 400
    kind = "client_input"


RATE_LIMIT_MARKERS = (
    "429",
    "rate limit",
    "ratelimit",
    "rate_limit",
    "too many requests",
    "resource exhausted",
    "resource_exhausted",
    "quota",
)


def is_rate_limit_error(error: BaseException) -> bool:
    """
    Check whether a provider error signals rate limiting.

    Matches on the exception class name (``RateLimitError``,
    ``ResourceExhausted``) and on the usual markers in the message.
    """
    name = type(error).__name__.lower()
    if "ratelimit" in name or "resourceexhausted" in name:
        return True

    status = getattr(error, "status_code", None) or getattr(error, "code", None)
    if status == 429:
        return True

    message = str(error).lower()
    return any(marker in message for marker in RATE_LIMIT_MARKERS)
