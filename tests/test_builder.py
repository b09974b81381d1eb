"""
Tests for SpeechRequestBuilder.

Tests cover:
- Fluent chaining and field assignment
- Voice settings sub-field setters preserve earlier sub-fields
- Aliases (input/text, response_format/output_format)
- Setters never validate
- Built requests are immutable snapshots
- Single-shot execute()
"""
from __future__ import annotations

import asyncio
import dataclasses

import httpx
import pytest
from pydantic import ValidationError

from xi_tts.api.schemas import (
    AudioFormat,
    SpeechRequestJson,
    TextNormalization,
    TtsModel,
    Voice,
    VoiceSettings,
)
from xi_tts.services.speech_client import (
    BuilderConsumedError,
    SpeechClient,
    SpeechRequest,
    SpeechRequestBuilder,
)


@pytest.fixture
def client():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"ok"))
    return SpeechClient(api_key="test-key", transport=transport)


class TestDefaults:
    """A fresh builder produces the default request."""

    def test_default_request(self, client):
        req = client.synthesize().build()
        assert req == SpeechRequest()
        assert req.text == ""
        assert req.model == TtsModel.ELEVEN_MULTILINGUAL_V2
        assert req.voice == Voice.RACHEL
        assert req.voice_settings is None
        assert req.output_format is None
        assert req.effective_format == AudioFormat.MP3_44100_128

    def test_synthesize_returns_builder(self, client):
        assert isinstance(client.synthesize(), SpeechRequestBuilder)


class TestChaining:
    """Every setter returns the builder."""

    def test_all_setters_chain(self, client):
        b = client.synthesize()
        chained = (
            b.text("hello")
            .model(TtsModel.ELEVEN_V3)
            .voice(Voice.DOMI)
            .stability(0.1)
            .similarity_boost(0.2)
            .style(0.3)
            .use_speaker_boost(False)
            .output_format(AudioFormat.PCM_44100)
            .language_code("fr")
            .seed(7)
            .previous_text("p")
            .next_text("n")
            .previous_request_ids(["a"])
            .next_request_ids(["b"])
            .apply_text_normalization(TextNormalization.OFF)
            .apply_language_text_normalization(True)
        )
        assert chained is b

        req = b.build()
        assert req.text == "hello"
        assert req.model == TtsModel.ELEVEN_V3
        assert req.voice == Voice.DOMI
        assert req.voice_settings == VoiceSettings(
            stability=0.1, similarity_boost=0.2, style=0.3, use_speaker_boost=False
        )
        assert req.output_format == AudioFormat.PCM_44100
        assert req.language_code == "fr"
        assert req.seed == 7
        assert req.previous_text == "p"
        assert req.next_text == "n"
        assert req.previous_request_ids == ("a",)
        assert req.next_request_ids == ("b",)
        assert req.apply_text_normalization == TextNormalization.OFF
        assert req.apply_language_text_normalization is True

    def test_last_write_wins(self, client):
        req = client.synthesize().text("one").text("two").build()
        assert req.text == "two"


class TestAliases:
    """Alias setters behave exactly like their counterparts."""

    def test_input_sets_text(self, client):
        assert client.synthesize().input("hi").build() == client.synthesize().text("hi").build()

    def test_response_format_sets_output_format(self, client):
        a = client.synthesize().response_format(AudioFormat.MP3_22050_32).build()
        b = client.synthesize().output_format(AudioFormat.MP3_22050_32).build()
        assert a == b
        assert a.output_format == AudioFormat.MP3_22050_32


class TestVoiceSettings:
    """Sub-field setters merge into the existing settings."""

    def test_first_sub_field_materializes_settings(self, client):
        req = client.synthesize().style(0.4).build()
        assert req.voice_settings == VoiceSettings(style=0.4)

    def test_sub_fields_are_preserved(self, client):
        req = (
            client.synthesize()
            .stability(0.5)
            .similarity_boost(0.75)
            .use_speaker_boost(True)
            .build()
        )
        assert req.voice_settings.stability == 0.5
        assert req.voice_settings.similarity_boost == 0.75
        assert req.voice_settings.style is None
        assert req.voice_settings.use_speaker_boost is True

    def test_sub_field_after_whole_settings(self, client):
        req = (
            client.synthesize()
            .voice_settings(VoiceSettings(stability=0.1, style=0.9))
            .style(0.2)
            .build()
        )
        assert req.voice_settings == VoiceSettings(stability=0.1, style=0.2)

    def test_whole_settings_replace_sub_fields(self, client):
        req = (
            client.synthesize()
            .stability(0.1)
            .voice_settings(VoiceSettings(similarity_boost=0.3))
            .build()
        )
        assert req.voice_settings == VoiceSettings(similarity_boost=0.3)

    def test_caller_settings_not_mutated(self, client):
        original = VoiceSettings(stability=0.1)
        client.synthesize().voice_settings(original).stability(0.9).build()
        assert original.stability == 0.1


class TestNoEagerValidation:
    """Setters accept anything; checks run at execution."""

    def test_invalid_values_are_recorded(self, client):
        req = (
            client.synthesize()
            .text("")
            .stability(5.0)
            .style(-1.0)
            .seed(-3)
            .build()
        )
        assert req.voice_settings.stability == 5.0
        assert req.voice_settings.style == -1.0
        assert req.seed == -3


class TestImmutability:
    """Built requests are frozen snapshots."""

    def test_request_is_frozen(self, client):
        req = client.synthesize().text("hi").build()
        with pytest.raises(dataclasses.FrozenInstanceError):
            req.text = "changed"

    def test_voice_settings_are_frozen(self, client):
        req = client.synthesize().stability(0.5).build()
        with pytest.raises(ValidationError):
            req.voice_settings.stability = 0.9

    def test_snapshot_unaffected_by_later_setters(self, client):
        b = client.synthesize().text("first").stability(0.1)
        snapshot = b.build()
        b.text("second").stability(0.9)
        assert snapshot.text == "first"
        assert snapshot.voice_settings.stability == 0.1

    def test_request_ids_copied_from_caller_list(self, client):
        ids = ["a", "b"]
        req = client.synthesize().previous_request_ids(ids).build()
        ids.append("c")
        assert req.previous_request_ids == ("a", "b")

    def test_single_string_is_not_split_into_ids(self, client):
        b = client.synthesize()
        with pytest.raises(TypeError, match="str"):
            b.previous_request_ids("abc")
        with pytest.raises(TypeError, match="bytes"):
            b.next_request_ids(b"abc")
        req = b.build()
        assert req.previous_request_ids is None
        assert req.next_request_ids is None

    def test_tuple_and_generator_ids_accepted(self, client):
        req = (
            client.synthesize()
            .previous_request_ids(("abc",))
            .next_request_ids(i for i in ["x", "y"])
            .build()
        )
        assert req.previous_request_ids == ("abc",)
        assert req.next_request_ids == ("x", "y")


class TestSingleShot:
    """execute() consumes the builder."""

    def test_execute_then_reuse_fails(self, client):
        b = client.synthesize().text("hi")
        asyncio.run(b.execute())

        with pytest.raises(BuilderConsumedError):
            b.text("again")
        with pytest.raises(BuilderConsumedError):
            b.build()
        with pytest.raises(BuilderConsumedError):
            asyncio.run(b.execute())

    def test_builder_consumed_even_when_execution_fails(self, client):
        from xi_tts.services.errors import MissingInputError

        b = client.synthesize()
        with pytest.raises(MissingInputError):
            asyncio.run(b.execute())
        with pytest.raises(BuilderConsumedError):
            b.text("late")


class TestWireRoundTrip:
    """Builder output converted to wire JSON."""

    def test_only_set_fields_present(self, client):
        req = (
            client.synthesize()
            .text("hello")
            .model(TtsModel.ELEVEN_FLASH_V2_5)
            .similarity_boost(0.6)
            .apply_text_normalization(TextNormalization.ON)
            .build()
        )
        wire = SpeechRequestJson.from_request(req).to_wire()
        assert wire == {
            "text": "hello",
            "model_id": "eleven_flash_v2_5",
            "voice_settings": {"similarity_boost": 0.6},
            "apply_text_normalization": "on",
        }
        assert "model" not in wire
        assert "voice" not in wire
        assert "output_format" not in wire

    def test_unset_fields_absent(self, client):
        wire = SpeechRequestJson.from_request(client.synthesize().text("x").build()).to_wire()
        assert set(wire) == {"text", "model_id"}
