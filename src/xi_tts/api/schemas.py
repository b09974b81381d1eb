"""
Text-to-speech API types and wire schemas.

Enumerations:
    TtsModel: synthesis engine variant (sent as `model_id`)
    Voice: named voice preset, each bound to a fixed provider voice id
    AudioFormat: output encoding, sent as the `output_format` query parameter
    TextNormalization: provider-side text normalization mode

Wire models (pydantic):
    VoiceSettings: stability / similarity_boost / style / use_speaker_boost
    SpeechRequestJson: JSON body of POST /v1/text-to-speech/{voice_id}
    ApiErrorResponse: error envelope `{"error": {"message", "type", "code"}}`

Example Body:
    {
        "text": "Hello there.",
        "model_id": "eleven_multilingual_v2",
        "voice_settings": {"stability": 0.5, "similarity_boost": 0.75},
        "apply_text_normalization": "auto"
    }

Optional fields that were never set are omitted from the body, never sent
as null.
"""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from xi_tts.services.speech_client import SpeechRequest


class TtsModel(str, Enum):
    """Synthesis models."""
    ELEVEN_V3 = "eleven_v3"
    ELEVEN_MULTILINGUAL_V2 = "eleven_multilingual_v2"
    ELEVEN_FLASH_V2_5 = "eleven_flash_v2_5"
    ELEVEN_TURBO_V2_5 = "eleven_turbo_v2_5"

    @classmethod
    def default(cls) -> "TtsModel":
        return cls.ELEVEN_MULTILINGUAL_V2


# Provider voice ids for the premade voices
VOICE_IDS = {
    "rachel": "21m00Tcm4TlvDq8ikWAM",
    "drew": "29vD33N1CtxCmqQRPOHJ",
    "clyde": "2EiwWnXFnvU5JabPnv8n",
    "paul": "5Q0t7uMcjvnagumLfvZi",
    "aria": "9BWtsMINqrJLrRacOk9x",
    "domi": "AZnzlk1XvdvUeBnXmlld",
    "dave": "CYw3kZ02Hs0563khs1Fj",
    "roger": "CwhRBWXzGAHq8TQ4Fs17",
    "fin": "D38z5RcWu1voky8WS1ja",
    "sarah": "EXAVITQu4vr4xnSDxMaL",
}


class Voice(str, Enum):
    """
    Premade voices.

    The enum value is the lowercase voice name; `voice_id` is the opaque
    identifier that goes into the request path.
    """
    RACHEL = "rachel"
    DREW = "drew"
    CLYDE = "clyde"
    PAUL = "paul"
    ARIA = "aria"
    DOMI = "domi"
    DAVE = "dave"
    ROGER = "roger"
    FIN = "fin"
    SARAH = "sarah"

    @property
    def voice_id(self) -> str:
        return VOICE_IDS[self.value]

    @classmethod
    def default(cls) -> "Voice":
        return cls.RACHEL


class AudioFormat(str, Enum):
    """
    Output formats, named `{codec}_{sample_rate}[_{bitrate_kbps}]`.

    mp3 formats carry a bitrate; pcm formats are raw 16-bit little-endian
    mono samples; ulaw_8000 is 8-bit mu-law (telephony).
    """
    MP3_22050_32 = "mp3_22050_32"
    MP3_44100_32 = "mp3_44100_32"
    MP3_44100_64 = "mp3_44100_64"
    MP3_44100_96 = "mp3_44100_96"
    MP3_44100_128 = "mp3_44100_128"
    MP3_44100_192 = "mp3_44100_192"
    PCM_16000 = "pcm_16000"
    PCM_22050 = "pcm_22050"
    PCM_24000 = "pcm_24000"
    PCM_44100 = "pcm_44100"
    ULAW_8000 = "ulaw_8000"

    @classmethod
    def default(cls) -> "AudioFormat":
        return cls.MP3_44100_128

    @property
    def codec(self) -> str:
        return self.value.split("_")[0]

    @property
    def sample_rate(self) -> int:
        return int(self.value.split("_")[1])

    @property
    def bitrate_kbps(self) -> Optional[int]:
        parts = self.value.split("_")
        return int(parts[2]) if len(parts) > 2 else None

    @property
    def file_extension(self) -> str:
        return {"mp3": "mp3", "pcm": "pcm", "ulaw": "ulaw"}[self.codec]


class TextNormalization(str, Enum):
    """How the provider expands numbers, abbreviations etc. before synthesis."""
    AUTO = "auto"
    ON = "on"
    OFF = "off"

    @classmethod
    def default(cls) -> "TextNormalization":
        return cls.AUTO


class VoiceSettings(BaseModel):
    """
    Per-request voice tuning.

    Every field is optional; unset fields are left to the voice's stored
    defaults. Instances are frozen: the request builder replaces the whole
    value with `model_copy(update=...)` when a single knob changes.

    Range checks ([0.0, 1.0] for the float knobs) happen at execution time,
    not here.
    """
    model_config = ConfigDict(frozen=True)

    stability: Optional[float] = None
    similarity_boost: Optional[float] = None
    style: Optional[float] = None
    use_speaker_boost: Optional[bool] = None


class SpeechRequestJson(BaseModel):
    """JSON body for POST /v1/text-to-speech/{voice_id}."""
    text: str
    model_id: str
    language_code: Optional[str] = None
    voice_settings: Optional[VoiceSettings] = None
    seed: Optional[int] = None
    previous_text: Optional[str] = None
    next_text: Optional[str] = None
    previous_request_ids: Optional[List[str]] = None
    next_request_ids: Optional[List[str]] = None
    apply_text_normalization: Optional[TextNormalization] = None
    apply_language_text_normalization: Optional[bool] = None

    @classmethod
    def from_request(cls, request: "SpeechRequest") -> "SpeechRequestJson":
        """Map a SpeechRequest onto wire field names (`model` -> `model_id`)."""
        return cls(
            text=request.text,
            model_id=TtsModel(request.model).value,
            language_code=request.language_code,
            voice_settings=request.voice_settings,
            seed=request.seed,
            previous_text=request.previous_text,
            next_text=request.next_text,
            previous_request_ids=_as_list(request.previous_request_ids),
            next_request_ids=_as_list(request.next_request_ids),
            apply_text_normalization=request.apply_text_normalization,
            apply_language_text_normalization=request.apply_language_text_normalization,
        )

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict with every unset optional field dropped."""
        return self.model_dump(mode="json", exclude_none=True)


def _as_list(ids: Any) -> Optional[List[str]]:
    if ids is None:
        return None
    return list(ids)


class ApiErrorDetail(BaseModel):
    message: str
    error_type: Optional[str] = Field(default=None, alias="type")
    code: Optional[str] = None


class ApiErrorResponse(BaseModel):
    """Provider error envelope."""
    error: ApiErrorDetail
