"""
xi-tts: typed async client for the ElevenLabs text-to-speech API.

Build a request with chained setters, execute it, get audio bytes back or
a structured TTSError. Validation is deferred to execution, and each call
is a single HTTP attempt.

Example Usage:
    >>> from xi_tts import SpeechClient, Voice, AudioFormat
    >>>
    >>> client = SpeechClient(api_key="...")
    >>> response = await (
    ...     client.synthesize()
    ...     .text("Hello from the builder.")
    ...     .voice(Voice.SARAH)
    ...     .similarity_boost(0.8)
    ...     .execute()
    ... )
    >>> response.save("hello.mp3")
"""

from xi_tts.api.schemas import AudioFormat, TextNormalization, TtsModel, Voice, VoiceSettings
from xi_tts.services import (
    ApiError,
    BuilderConsumedError,
    DeserializationError,
    ErrorCode,
    HttpClientError,
    InputTooLongError,
    InvalidSeedError,
    InvalidVoiceSettingsError,
    MissingApiKeyError,
    MissingInputError,
    SerializationError,
    SpeechClient,
    SpeechRequest,
    SpeechRequestBuilder,
    SpeechResponse,
    TTSError,
)

__version__ = "0.1.0"
__all__ = [
    "__version__",
    "SpeechClient",
    "SpeechRequestBuilder",
    "SpeechRequest",
    "SpeechResponse",
    "BuilderConsumedError",
    "TtsModel",
    "Voice",
    "AudioFormat",
    "TextNormalization",
    "VoiceSettings",
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
