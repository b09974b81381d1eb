"""
SpeechClient - text-to-speech requests against the ElevenLabs HTTP API.

Architecture:
    SpeechRequestBuilder → SpeechRequest (frozen) → SpeechClient.execute
        → validate → encode → POST → SpeechResponse | TTSError

The builder only records values; every check happens in execute(), so
fields may be set in any order. A call is a single attempt: no retries,
no partial results.

Wire Call:
    POST {base_url}/v1/text-to-speech/{voice_id}?output_format={format}
    xi-api-key: {api_key}
    Content-Type: application/json

    {"text": "...", "model_id": "...", ...only the fields that were set}

Concurrency:
    The client holds a frozen ClientConfig and opens one httpx.AsyncClient
    per call, so concurrent execute() calls from the same client are safe.

Example:
    >>> client = SpeechClient(api_key="...")
    >>> response = await (
    ...     client.synthesize()
    ...     .text("Hello there.")
    ...     .voice(Voice.ARIA)
    ...     .stability(0.4)
    ...     .output_format(AudioFormat.PCM_24000)
    ...     .execute()
    ... )
    >>> response.save("hello.wav", as_wav=True)
"""
from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import httpx
from pydantic import ValidationError

from xi_tts.api.schemas import (
    ApiErrorResponse,
    AudioFormat,
    SpeechRequestJson,
    TextNormalization,
    TtsModel,
    Voice,
    VoiceSettings,
)
from xi_tts.core.config import ClientConfig, Defaults, Settings
from xi_tts.core.logging import debug, error, fail, get_logger, success, verbose
from xi_tts.services.errors import (
    ApiError,
    DeserializationError,
    HttpClientError,
    SerializationError,
)
from xi_tts.services.validators import validate_request
from xi_tts.utils.audio import duration_seconds, pcm_to_wav_bytes, ulaw_to_wav_bytes
from xi_tts.utils.timeit import timeit

_LOG = get_logger("xi-tts.client")

API_PATH = "/v1/text-to-speech"
API_KEY_HEADER = "xi-api-key"
REQUEST_ID_HEADER = "request-id"


class BuilderConsumedError(RuntimeError):
    """Raised when a builder is used after execute()."""


# =============================================================================
# Request / Response
# =============================================================================

@dataclass(frozen=True)
class SpeechRequest:
    """
    A complete synthesis request.

    Attributes:
        text: Text to speak (1-5000 characters, checked at execution).
        model: Synthesis model.
        voice: Premade voice; its voice_id goes into the URL path.
        voice_settings: Optional per-request voice tuning.
        output_format: Audio encoding; None means mp3_44100_128.
        language_code: ISO 639-1 code to force a language.
        seed: Best-effort determinism, unsigned 32-bit.
        previous_text / next_text: Surrounding text for prosody continuity.
        previous_request_ids / next_request_ids: Request ids of neighbouring
            generations when stitching a long text from several calls.
        apply_text_normalization: auto / on / off.
        apply_language_text_normalization: Language-specific normalization.
    """
    text: str = ""
    model: TtsModel = TtsModel.ELEVEN_MULTILINGUAL_V2
    voice: Voice = Voice.RACHEL
    voice_settings: Optional[VoiceSettings] = None
    output_format: Optional[AudioFormat] = None
    language_code: Optional[str] = None
    seed: Optional[int] = None
    previous_text: Optional[str] = None
    next_text: Optional[str] = None
    previous_request_ids: Optional[Tuple[str, ...]] = None
    next_request_ids: Optional[Tuple[str, ...]] = None
    apply_text_normalization: Optional[TextNormalization] = None
    apply_language_text_normalization: Optional[bool] = None

    @property
    def effective_format(self) -> AudioFormat:
        if self.output_format is None:
            return AudioFormat.default()
        return AudioFormat(self.output_format)


@dataclass
class SpeechResponse:
    """
    Synthesized audio.

    Attributes:
        audio_data: Raw response body.
        format: Format the audio was requested in.
        request_id: Provider request id (`request-id` header), usable in
            previous_request_ids of the next request.
    """
    audio_data: bytes
    format: AudioFormat
    request_id: Optional[str] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        return duration_seconds(self.audio_data, self.format.codec, self.format.sample_rate)

    def to_wav(self) -> bytes:
        """
        Wrap pcm_* / ulaw_8000 audio in a WAV container.

        Raises:
            DeserializationError: mp3 audio, or samples that cannot be decoded.
        """
        codec = self.format.codec
        try:
            if codec == "pcm":
                return pcm_to_wav_bytes(self.audio_data, self.format.sample_rate)
            if codec == "ulaw":
                return ulaw_to_wav_bytes(self.audio_data, self.format.sample_rate)
        except (ValueError, RuntimeError) as e:
            raise DeserializationError(f"cannot decode {self.format.value} audio: {e}") from e
        raise DeserializationError(f"{self.format.value} audio cannot be converted to WAV")

    def save(self, path: Union[str, Path], as_wav: bool = False) -> Path:
        """Write the audio (optionally as WAV) and return the path."""
        out = Path(path)
        out.write_bytes(self.to_wav() if as_wav else self.audio_data)
        return out


# =============================================================================
# Client
# =============================================================================

class SpeechClient:
    """
    Executes speech requests.

    Args:
        api_key: Provider API key. May be empty until a request is executed.
        base_url: API origin, defaults to the production endpoint.
        timeout_ms: Timeout handed to httpx for the whole call.
        transport: Optional httpx transport (e.g. httpx.MockTransport).
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = Defaults.BASE_URL,
        timeout_ms: int = Defaults.TIMEOUT_MS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = ClientConfig(api_key=api_key, base_url=base_url, timeout_ms=timeout_ms)
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "SpeechClient":
        return cls(config.api_key, config.base_url, config.timeout_ms, transport=transport)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "SpeechClient":
        """Client from settings.yaml plus env overrides (see core.config)."""
        return cls.from_config(settings.get_client_config(), transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._config

    def with_base_url(self, base_url: str) -> "SpeechClient":
        return SpeechClient.from_config(self._config.with_base_url(base_url), self._transport)

    def with_timeout(self, timeout_ms: int) -> "SpeechClient":
        return SpeechClient.from_config(self._config.with_timeout(timeout_ms), self._transport)

    def synthesize(self) -> "SpeechRequestBuilder":
        """Start a new request."""
        return SpeechRequestBuilder(self)

    # -------------------------------------------------------------------------
    # Request construction
    # -------------------------------------------------------------------------

    def encode(self, request: SpeechRequest) -> bytes:
        """
        Serialize the request body.

        Raises:
            SerializationError: A field holds a value the wire model rejects.
        """
        try:
            payload = SpeechRequestJson.from_request(request).to_wire()
            return json.dumps(payload, ensure_ascii=False).encode("utf-8")
        except (ValidationError, ValueError, TypeError) as e:
            raise SerializationError(str(e)) from e

    def build_url(self, request: SpeechRequest) -> httpx.URL:
        """
        Target URL for a request.

        Raises:
            SerializationError: voice or output_format is not a known member.
            HttpClientError: base_url does not form a valid http(s) URL.
        """
        try:
            voice_id = Voice(request.voice).voice_id
            output_format = request.effective_format
        except ValueError as e:
            raise SerializationError(str(e)) from e

        raw = f"{self._config.base_url.rstrip('/')}{API_PATH}/{voice_id}"
        try:
            url = httpx.URL(raw, params={"output_format": output_format.value})
        except httpx.InvalidURL as e:
            raise HttpClientError(f"bad url {raw!r}: {e}", e) from e

        if url.scheme not in ("http", "https") or not url.host:
            raise HttpClientError(f"bad url {raw!r}: expected an http(s) URL with a host")
        return url

    def headers(self) -> dict:
        return {
            API_KEY_HEADER: self._config.api_key,
            "Content-Type": "application/json",
        }

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    async def execute(self, request: SpeechRequest) -> SpeechResponse:
        """
        Validate, send and classify one request.

        Returns:
            SpeechResponse with the full audio body.

        Raises:
            MissingInputError, InputTooLongError, InvalidVoiceSettingsError,
            InvalidSeedError, MissingApiKeyError: before any network I/O.
            SerializationError: the request could not be encoded.
            HttpClientError: bad URL or transport failure.
            ApiError: non-2xx response.
        """
        validate_request(request, self._config.api_key)

        body = self.encode(request)
        url = self.build_url(request)
        output_format = request.effective_format

        verbose(
            _LOG,
            "speech_request",
            voice=Voice(request.voice).value,
            model=TtsModel(request.model).value,
            format=output_format.value,
            chars=len(request.text),
        )
        debug(_LOG, "speech_payload", url=str(url), keys=sorted(json.loads(body)))

        timer = timeit("speech_request")
        try:
            async with httpx.AsyncClient(timeout=self._config.timeout_s, transport=self._transport) as http:
                with timer:
                    resp = await http.post(url, content=body, headers=self.headers())
        except httpx.HTTPError as e:
            error(_LOG, "http_client_error", exception=type(e).__name__, detail=str(e), seconds=round(timer.seconds, 3))
            raise HttpClientError(str(e) or type(e).__name__, e) from e

        seconds = round(timer.seconds, 3)
        if resp.is_success:
            audio = resp.content
            request_id = resp.headers.get(REQUEST_ID_HEADER)
            success(
                _LOG,
                "speech_ok",
                status=resp.status_code,
                bytes=len(audio),
                format=output_format.value,
                provider_request_id=request_id,
                seconds=seconds,
            )
            return SpeechResponse(audio_data=audio, format=output_format, request_id=request_id)

        api_error = self._classify_error(resp.status_code, resp.content)
        fail(_LOG, "api_error", status=api_error.status, message=api_error.message, seconds=seconds)
        raise api_error

    @staticmethod
    def _classify_error(status: int, body: bytes) -> ApiError:
        """Decode the error envelope, falling back to the body as lossy text."""
        try:
            envelope = ApiErrorResponse.model_validate_json(body)
        except ValueError:  # pydantic ValidationError, undecodable bytes
            return ApiError(status, body.decode("utf-8", errors="replace"))

        detail = envelope.error
        return ApiError(status, detail.message, error_type=detail.error_type, error_code=detail.code)


# =============================================================================
# Builder
# =============================================================================

def _id_tuple(ids: Sequence[str]) -> Tuple[str, ...]:
    # str and bytes are Sequences but never a list of ids
    if isinstance(ids, (str, bytes)):
        raise TypeError(f"request ids must be a sequence of strings, got {type(ids).__name__}")
    return tuple(ids)


class SpeechRequestBuilder:
    """
    Fluent, single-shot request builder.

    Setters record values without checking them and return the builder;
    the only exception is a bare string passed as a request id list
    (TypeError).
    Voice setting setters keep previously set knobs. `input` and
    `response_format` are aliases of `text` and `output_format`.
    After execute() the builder is spent; any further use raises
    BuilderConsumedError.
    """

    def __init__(self, client: SpeechClient, request: Optional[SpeechRequest] = None):
        self._client = client
        self._request = request or SpeechRequest()
        self._consumed = False

    def _ensure_open(self) -> None:
        if self._consumed:
            raise BuilderConsumedError("request builder was already executed")

    def _set(self, **changes) -> "SpeechRequestBuilder":
        self._ensure_open()
        self._request = replace(self._request, **changes)
        return self

    def _update_voice_settings(self, **changes) -> "SpeechRequestBuilder":
        current = self._request.voice_settings or VoiceSettings()
        return self._set(voice_settings=current.model_copy(update=changes))

    def text(self, text: str) -> "SpeechRequestBuilder":
        return self._set(text=text)

    def input(self, text: str) -> "SpeechRequestBuilder":
        return self.text(text)

    def model(self, model: TtsModel) -> "SpeechRequestBuilder":
        return self._set(model=model)

    def voice(self, voice: Voice) -> "SpeechRequestBuilder":
        return self._set(voice=voice)

    def voice_settings(self, settings: VoiceSettings) -> "SpeechRequestBuilder":
        return self._set(voice_settings=settings)

    def stability(self, stability: float) -> "SpeechRequestBuilder":
        return self._update_voice_settings(stability=stability)

    def similarity_boost(self, similarity_boost: float) -> "SpeechRequestBuilder":
        return self._update_voice_settings(similarity_boost=similarity_boost)

    def style(self, style: float) -> "SpeechRequestBuilder":
        return self._update_voice_settings(style=style)

    def use_speaker_boost(self, use_speaker_boost: bool) -> "SpeechRequestBuilder":
        return self._update_voice_settings(use_speaker_boost=use_speaker_boost)

    def output_format(self, output_format: AudioFormat) -> "SpeechRequestBuilder":
        return self._set(output_format=output_format)

    def response_format(self, output_format: AudioFormat) -> "SpeechRequestBuilder":
        return self.output_format(output_format)

    def language_code(self, code: str) -> "SpeechRequestBuilder":
        return self._set(language_code=code)

    def seed(self, seed: int) -> "SpeechRequestBuilder":
        return self._set(seed=seed)

    def previous_text(self, text: str) -> "SpeechRequestBuilder":
        return self._set(previous_text=text)

    def next_text(self, text: str) -> "SpeechRequestBuilder":
        return self._set(next_text=text)

    def previous_request_ids(self, ids: Sequence[str]) -> "SpeechRequestBuilder":
        return self._set(previous_request_ids=_id_tuple(ids))

    def next_request_ids(self, ids: Sequence[str]) -> "SpeechRequestBuilder":
        return self._set(next_request_ids=_id_tuple(ids))

    def apply_text_normalization(self, mode: TextNormalization) -> "SpeechRequestBuilder":
        return self._set(apply_text_normalization=mode)

    def apply_language_text_normalization(self, enabled: bool) -> "SpeechRequestBuilder":
        return self._set(apply_language_text_normalization=enabled)

    def build(self) -> SpeechRequest:
        """Current request snapshot."""
        self._ensure_open()
        return self._request

    async def execute(self) -> SpeechResponse:
        """Send the request; the builder cannot be used afterwards."""
        self._ensure_open()
        self._consumed = True
        return await self._client.execute(self._request)
