"""Error types raised by the generation pipeline."""

UNKNOWN_ERROR_CODE = "UNKNOWN_ERROR"


class GenerationError(Exception):
    """Base class for generation pipeline failures."""

    pass


class MissingCredentialError(GenerationError):
    """The model provider credential is not configured."""

    def __init__(self, message: str = "OPENROUTER_API_KEY is not set in environment"):
        super().__init__(message)


class ModelInvocationError(GenerationError):
    """The model provider call did not produce usable content."""

    pass


class ModelHTTPError(ModelInvocationError):
    """The model provider answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str, body: str):
        super().__init__(f"HTTP error: {status_code} {reason} - {body}")
        self.status_code = status_code
        self.reason = reason
        self.body = body


class ModelTimeoutError(ModelInvocationError):
    """The model provider did not answer within the configured timeout."""

    def __init__(self, timeout: float):
        super().__init__(f"Model request timed out after {timeout:g}s")
        self.timeout = timeout


class EmptyModelResponseError(ModelInvocationError):
    """The completion carried no message content."""

    def __init__(self, message: str = "Brak zawartości w odpowiedzi AI"):
        super().__init__(message)


class MalformedModelResponseError(ModelInvocationError):
    """The provider body was not a JSON completion object."""

    pass


class ResponseParseError(GenerationError):
    """Model content could not be turned into flashcard proposals."""

    pass


class NoJsonFoundError(ResponseParseError):
    """No array or object shaped text was found in the content."""

    def __init__(self, message: str = "No JSON object found in response"):
        super().__init__(message)


class InvalidJsonError(ResponseParseError):
    """The JSON candidate stayed unparsable after cleanup."""

    def __init__(self, message: str = "Failed to parse JSON from AI response"):
        super().__init__(message)


class UnexpectedPayloadError(ResponseParseError):
    """Parsed JSON is neither a list nor a valid flashcard object."""

    pass


class SessionExpiredError(GenerationError):
    """The persistence credential expired; the user has to log in again."""

    def __init__(self, message: str = "Session expired, please log in again"):
        super().__init__(message)


class GenerationRecordError(GenerationError):
    """Writing the generation record failed."""

    pass


def error_code_for(error: object) -> str:
    """Classify an error for the generation error log."""
    if isinstance(error, BaseException):
        return type(error).__name__ or UNKNOWN_ERROR_CODE
    return UNKNOWN_ERROR_CODE


def error_message_for(error: object) -> str:
    """Human-readable message for the generation error log."""
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error)
