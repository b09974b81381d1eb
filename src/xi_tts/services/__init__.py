"""
Services layer: request validation, the speech client and its errors.

Components:
    - speech_client.py: SpeechClient, SpeechRequestBuilder, SpeechRequest,
      SpeechResponse
    - validators.py: execution-time request checks
    - errors.py: TTSError hierarchy
"""
from .errors import (
    ApiError,
    DeserializationError,
    ErrorCode,
    HttpClientError,
    InputTooLongError,
    InvalidSeedError,
    InvalidVoiceSettingsError,
    MissingApiKeyError,
    MissingInputError,
    SerializationError,
    TTSError,
)
from .speech_client import (
    BuilderConsumedError,
    SpeechClient,
    SpeechRequest,
    SpeechRequestBuilder,
    SpeechResponse,
)

__all__ = [
    "SpeechClient",
    "SpeechRequestBuilder",
    "SpeechRequest",
    "SpeechResponse",
    "BuilderConsumedError",
    "TTSError",
    "ErrorCode",
    "MissingInputError",
    "InputTooLongError",
    "InvalidVoiceSettingsError",
    "InvalidSeedError",
    "MissingApiKeyError",
    "SerializationError",
    "DeserializationError",
    "HttpClientError",
    "ApiError",
]
