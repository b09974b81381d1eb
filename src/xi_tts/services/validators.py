"""
Request validation for speech synthesis.

Validation runs at execution time, never in the builder setters, and
short-circuits on the first failure in this order:

    1. text non-empty                      -> MissingInputError
    2. len(text) <= 5000 characters        -> InputTooLongError(length)
    3. voice_settings.stability,
       similarity_boost, style in [0, 1]   -> InvalidVoiceSettingsError(field, value)
    4. seed in [0, 2**32 - 1]              -> InvalidSeedError(value)
    5. API key non-empty                   -> MissingApiKeyError

Text length counts characters (code points), not encoded bytes.
NaN voice settings are rejected since NaN lies in no interval.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from xi_tts.api.schemas import VoiceSettings
from xi_tts.core.config import Defaults
from xi_tts.core.logging import get_logger, warn
from xi_tts.services.errors import (
    InputTooLongError,
    InvalidSeedError,
    InvalidVoiceSettingsError,
    MissingApiKeyError,
    MissingInputError,
    TTSError,
)

if TYPE_CHECKING:
    from xi_tts.services.speech_client import SpeechRequest

_LOG = get_logger("xi-tts.validators")

# Checked in this order; use_speaker_boost has no numeric range.
VOICE_SETTING_FIELDS = ("stability", "similarity_boost", "style")


def validate_text(text: Optional[str], max_length: int = Defaults.MAX_INPUT_LENGTH) -> str:
    """
    Validate the text to synthesize.

    Raises:
        MissingInputError: text is None or empty.
        InputTooLongError: more than max_length characters.
    """
    if not text:
        raise MissingInputError()

    if len(text) > max_length:
        raise InputTooLongError(len(text), max_length)

    return text


def validate_voice_settings(settings: Optional[VoiceSettings]) -> Optional[VoiceSettings]:
    """
    Check stability, similarity_boost and style (in that order) lie in
    [0.0, 1.0] inclusive. Unset fields are skipped.

    Raises:
        InvalidVoiceSettingsError: naming the first offending field.
    """
    if settings is None:
        return None

    for field in VOICE_SETTING_FIELDS:
        value = getattr(settings, field)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidVoiceSettingsError(field, value)
        if not (Defaults.MIN_VOICE_SETTING <= value <= Defaults.MAX_VOICE_SETTING):
            raise InvalidVoiceSettingsError(field, value)

    return settings


def validate_seed(seed: Optional[int]) -> Optional[int]:
    """
    Seed must be an integer that fits an unsigned 32-bit value.

    Raises:
        InvalidSeedError: negative, too large, or not an integer.
    """
    if seed is None:
        return None

    if isinstance(seed, bool) or not isinstance(seed, int):
        raise InvalidSeedError(seed)

    if not (0 <= seed <= Defaults.MAX_SEED):
        raise InvalidSeedError(seed)

    return seed


def validate_api_key(api_key: Optional[str]) -> str:
    """Raises MissingApiKeyError if the key is None or empty."""
    if not api_key:
        raise MissingApiKeyError()
    return api_key


def validate_request(request: "SpeechRequest", api_key: Optional[str]) -> None:
    """
    Run every check against a request, first failure wins.

    Raises:
        TTSError: one of the validation subclasses listed in the module doc.
    """
    try:
        validate_text(request.text)
        validate_voice_settings(request.voice_settings)
        validate_seed(request.seed)
        validate_api_key(api_key)
    except TTSError as e:
        warn(_LOG, "validation_failed", code=e.code, **e.details)
        raise
