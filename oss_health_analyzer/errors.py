"""
Error taxonomy for the data-acquisition layer.

Every failure raised by the GitHub client is one of the classes below, so
callers can decide on retry and on user-facing messages from the class alone.
"""

import httpx


class AcquisitionError(Exception):
    """Base class for all acquisition failures."""

    retryable = False
    hint = "Check the repository identifier and your network connection."

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(AcquisitionError):
    """HTTP 429, or 403 with an exhausted rate-limit quota."""

    retryable = True
    hint = (
        "GitHub API rate limit exceeded. Set GITHUB_TOKEN to authenticate "
        "and raise your quota."
    )


class ServerError(AcquisitionError):
    """HTTP 5xx."""

    retryable = True
    hint = "GitHub is having trouble right now. Try again in a few minutes."


class TransientNetworkError(AcquisitionError):
    """Connection reset, timeout or protocol hiccup."""

    retryable = True
    hint = "Network problem while contacting GitHub. Check your connection."


class NotFoundError(AcquisitionError):
    """HTTP 404 on a required resource."""

    hint = "Repository not found. Check the owner/name spelling."


class UnauthorizedError(AcquisitionError):
    """HTTP 401, or 403 that is not a rate-limit response."""

    hint = "Access denied. Check that GITHUB_TOKEN is valid and has repo scope."


class ValidationError(AcquisitionError):
    """Malformed repository identifier or HTTP 422."""

    hint = "Use the form OWNER/REPO, for example: psf/requests."


class ClientError(AcquisitionError):
    """Any other 4xx response."""


def is_retryable(error: BaseException) -> bool:
    """Return True when the error class is worth another attempt."""
    return isinstance(error, AcquisitionError) and error.retryable


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    if response.status_code != 403:
        return False
    if response.headers.get("x-ratelimit-remaining") == "0":
        return True
    # Secondary rate limits come back as 403 with an explanatory body.
    return "rate limit" in response.text.lower()


GITHUB_SOURCE = "GitHub API"


def _with_hint(error: AcquisitionError, hint: str | None) -> AcquisitionError:
    if hint:
        error.hint = hint
    return error


def classify_response(
    response: httpx.Response,
    source: str = GITHUB_SOURCE,
    hint: str | None = None,
) -> AcquisitionError:
    """
    Map a non-success HTTP response to an error instance.

    Args:
        response: Response with status code >= 400.
        source: Service name used in the error message.
        hint: User-facing hint replacing the class default.

    Returns:
        The matching AcquisitionError subclass instance (not raised).
    """
    status = response.status_code
    try:
        url = str(response.request.url)
    except RuntimeError:
        # Responses built by hand carry no request.
        url = "<unknown>"
    message = f"{source} returned {status} for {url}"

    if _is_rate_limited(response):
        error: AcquisitionError = RateLimitedError(message, status)
    elif status >= 500:
        error = ServerError(message, status)
    elif status == 404:
        error = NotFoundError(message, status)
    elif status in (401, 403):
        error = UnauthorizedError(message, status)
    elif status in (400, 422):
        error = ValidationError(message, status)
    else:
        error = ClientError(message, status)
    return _with_hint(error, hint)


def classify_transport_error(
    error: httpx.HTTPError, hint: str | None = None
) -> AcquisitionError:
    """Map an httpx transport exception to TransientNetworkError."""
    if isinstance(
        error, (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)
    ):
        return _with_hint(TransientNetworkError(f"Network error: {error}"), hint)
    return _with_hint(AcquisitionError(f"HTTP error: {error}"), hint)
