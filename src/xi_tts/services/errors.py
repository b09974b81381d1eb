"""
Error types for speech synthesis calls.

Every failure of a synthesis call is raised as a TTSError subclass. Each
carries a machine-readable `code`, a human-readable `message` and the
structured values a caller needs to branch on (field name, offending value,
HTTP status) both as attributes and in `details`.

Hierarchy:
    TTSError
    ├── MissingInputError          text is empty
    ├── InputTooLongError          text exceeds the character limit
    ├── InvalidVoiceSettingsError  stability/similarity_boost/style out of [0, 1]
    ├── InvalidSeedError           seed outside the unsigned 32-bit range
    ├── MissingApiKeyError         no API key configured
    ├── SerializationError         request body could not be encoded
    ├── DeserializationError       response audio could not be decoded
    ├── HttpClientError            bad URL, DNS, connect, timeout
    └── ApiError                   non-2xx response from the provider

None of these are retried; every call ends in exactly one outcome.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class ErrorCode:
    """Error codes carried by TTSError.code and returned by to_dict()."""
    MISSING_INPUT = "MISSING_INPUT"
    INPUT_TOO_LONG = "INPUT_TOO_LONG"
    INVALID_VOICE_SETTINGS = "INVALID_VOICE_SETTINGS"
    INVALID_SEED = "INVALID_SEED"
    MISSING_API_KEY = "MISSING_API_KEY"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"
    DESERIALIZATION_ERROR = "DESERIALIZATION_ERROR"
    HTTP_CLIENT_ERROR = "HTTP_CLIENT_ERROR"
    API_ERROR = "API_ERROR"


class TTSError(Exception):
    """
    Base exception for synthesis failures.

    Attributes:
        message: Human-readable error message.
        code: Error code from ErrorCode.
        details: Structured context (field, value, status, ...).
    """
    def __init__(self, message: str, code: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly error dict."""
        result: Dict[str, Any] = {
            "ok": False,
            "error": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class MissingInputError(TTSError):
    def __init__(self) -> None:
        super().__init__("missing input text", ErrorCode.MISSING_INPUT)


class InputTooLongError(TTSError):
    def __init__(self, length: int, max_length: int = 5000):
        self.length = length
        self.max_length = max_length
        super().__init__(
            f"input text too long: {length} characters (max: {max_length})",
            ErrorCode.INPUT_TOO_LONG,
            {"length": length, "max_length": max_length},
        )


class InvalidVoiceSettingsError(TTSError):
    def __init__(self, field: str, value: float):
        self.field = field
        self.value = value
        super().__init__(
            f"invalid voice setting {field}: {value} (must be between 0.0 and 1.0)",
            ErrorCode.INVALID_VOICE_SETTINGS,
            {"field": field, "value": value},
        )


class InvalidSeedError(TTSError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"invalid seed value: {value!r} (must be between 0 and 4294967295)",
            ErrorCode.INVALID_SEED,
            {"value": value},
        )


class MissingApiKeyError(TTSError):
    def __init__(self) -> None:
        super().__init__("missing API key", ErrorCode.MISSING_API_KEY)


class SerializationError(TTSError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"serialization error: {detail}", ErrorCode.SERIALIZATION_ERROR, {"detail": detail})


class DeserializationError(TTSError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"deserialization error: {detail}", ErrorCode.DESERIALIZATION_ERROR, {"detail": detail})


class HttpClientError(TTSError):
    """
    Transport-level failure: malformed URL, DNS, connection refused,
    timeout. The underlying httpx exception (if any) is kept in `cause`
    and chained as __cause__.
    """
    def __init__(self, detail: str, cause: Optional[BaseException] = None):
        self.detail = detail
        self.cause = cause
        details: Dict[str, Any] = {"detail": detail}
        if cause is not None:
            details["exception"] = type(cause).__name__
        super().__init__(f"HTTP client error: {detail}", ErrorCode.HTTP_CLIENT_ERROR, details)


class ApiError(TTSError):
    """
    Non-2xx response.

    Attributes:
        status: HTTP status code.
        message: Provider message, or the raw body text if the body was not
            the JSON error envelope.
        error_type: `error.type` from the envelope, if present.
        error_code: `error.code` from the envelope, if present.
    """
    def __init__(
        self,
        status: int,
        message: str,
        error_type: Optional[str] = None,
        error_code: Optional[str] = None,
    ):
        self.status = status
        self.error_type = error_type
        self.error_code = error_code
        details: Dict[str, Any] = {"status": status}
        if error_type:
            details["type"] = error_type
        if error_code:
            details["code"] = error_code
        super().__init__(message, ErrorCode.API_ERROR, details)

    def __str__(self) -> str:
        return f"API error (status {self.status}): {self.message}"
