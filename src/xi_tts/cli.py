"""
Command-Line Interface for xi-tts.

Usage Examples:
    # Single text, default voice/model/format
    xi-tts "Hello there." --out hello.mp3

    # Voice tuning and raw PCM wrapped as WAV
    xi-tts --text "Hello" --voice aria --stability 0.4 --format pcm_24000 --wav --out hello.wav

    # Batch: one line per item, consecutive items are stitched together
    xi-tts --file chapter.txt --out chapter/

    # Show the URL and JSON body without calling the API
    xi-tts --text "Test" --dry-run --json

    # List voices
    xi-tts --voices

Environment Variables:
    ELEVENLABS_API_KEY / XI_API_KEY: API key
    XI_TTS_BASE_URL: API origin override
    XI_TTS_TIMEOUT_MS: Request timeout override
    XI_TTS_SETTINGS: Settings YAML (default config/settings.yaml)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

import yaml

from xi_tts.api.schemas import AudioFormat, SpeechRequestJson, TextNormalization, TtsModel, Voice
from xi_tts.core.config import ConfigValidationError, Settings, load_settings
from xi_tts.core.logging import configure_logging, get_logger, info, set_request_id
from xi_tts.services.errors import TTSError
from xi_tts.services.speech_client import SpeechClient, SpeechRequestBuilder, SpeechResponse

# The provider accepts at most three ids in previous_request_ids.
MAX_STITCH_IDS = 3


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="xi-tts CLI (ElevenLabs text-to-speech)")

    parser.add_argument("text_pos", nargs="?", help="Text to synthesize (positional)")
    parser.add_argument("--text", help="Text to synthesize")
    parser.add_argument("--file", help="Batch input file (1 line = 1 item)")

    parser.add_argument("--out", help="Output path (file, or dir in batch mode)")
    parser.add_argument("--wav", action="store_true",
                        help="Wrap pcm/ulaw output in a WAV container")

    parser.add_argument("--voice", choices=[v.value for v in Voice], help="Voice name")
    parser.add_argument("--model", choices=[m.value for m in TtsModel], help="Model id")
    parser.add_argument("--format", dest="output_format", choices=[f.value for f in AudioFormat],
                        help="Output format")
    parser.add_argument("--language", help="ISO 639-1 language code")
    parser.add_argument("--seed", type=int, help="Seed for best-effort determinism")
    parser.add_argument("--stability", type=float)
    parser.add_argument("--similarity-boost", type=float)
    parser.add_argument("--style", type=float)
    parser.add_argument("--speaker-boost", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument("--normalization", choices=[n.value for n in TextNormalization],
                        help="Text normalization mode")

    parser.add_argument("--settings", help="Settings YAML path")
    parser.add_argument("--dry-run", action="store_true",
                        help="Print request URL and body without calling the API")
    parser.add_argument("--json", action="store_true", help="Print JSON summary")
    parser.add_argument("--voices", action="store_true", help="List voices and exit")

    return parser.parse_args(argv)


def _load_texts(args: argparse.Namespace) -> List[str]:
    text = args.text or args.text_pos

    if args.file:
        if text:
            raise SystemExit("Use --file without --text or positional text.")
        lines = Path(args.file).read_text(encoding="utf-8").splitlines()
        items = [line.strip() for line in lines if line.strip()]
        if not items:
            raise SystemExit("Input file is empty.")
        return items

    if not text:
        raise SystemExit("Provide --text or a positional text.")
    return [text]


def _resolve_output_paths(args: argparse.Namespace, count: int, extension: str) -> List[Path]:
    if args.file:
        out_dir = Path(args.out or "out")
        out_dir.mkdir(parents=True, exist_ok=True)
        return [out_dir / f"item_{i + 1:03d}.{extension}" for i in range(count)]

    out_path = Path(args.out or f"out.{extension}")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    return [out_path]


def _load_cli_settings(path: Optional[str]) -> Settings:
    source = path or os.getenv("XI_TTS_SETTINGS", "config/settings.yaml")
    try:
        settings = load_settings(source)
    except FileNotFoundError:
        if path:
            raise SystemExit(f"Settings file not found: {path}")
        return Settings(raw={})
    except yaml.YAMLError as e:
        raise SystemExit(f"Settings file is not valid YAML: {source}: {e}")

    if not isinstance(settings.raw, dict):
        raise SystemExit(f"Settings file must contain a mapping: {source}")
    return settings


def _setting_choice(enum_cls, value: str, key: str):
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise SystemExit(f"Invalid {key}: {value!r} (choose from {choices})")


def _builder_for(
    client: SpeechClient,
    args: argparse.Namespace,
    settings: Settings,
    texts: List[str],
    index: int,
) -> SpeechRequestBuilder:
    """Apply CLI options (falling back to settings) for item `index`."""
    b = (
        client.synthesize()
        .text(texts[index])
        .voice(_setting_choice(Voice, args.voice or settings.default_voice, "speech.voice"))
        .model(_setting_choice(TtsModel, args.model or settings.default_model, "speech.model"))
        .output_format(_setting_choice(
            AudioFormat, args.output_format or settings.default_output_format, "speech.output_format"
        ))
    )

    language = args.language or settings.default_language
    if language:
        b.language_code(language)
    if args.seed is not None:
        b.seed(args.seed)
    if args.stability is not None:
        b.stability(args.stability)
    if args.similarity_boost is not None:
        b.similarity_boost(args.similarity_boost)
    if args.style is not None:
        b.style(args.style)
    if args.speaker_boost is not None:
        b.use_speaker_boost(args.speaker_boost)
    if args.normalization:
        b.apply_text_normalization(TextNormalization(args.normalization))

    # Batch items get their neighbours as context
    if len(texts) > 1:
        if index > 0:
            b.previous_text(texts[index - 1])
        if index < len(texts) - 1:
            b.next_text(texts[index + 1])
    return b


async def _synthesize_all(
    client: SpeechClient,
    args: argparse.Namespace,
    settings: Settings,
    texts: List[str],
    out_paths: List[Path],
) -> List[dict]:
    log = get_logger("xi-tts.cli")
    results = []
    previous_ids: List[str] = []

    for i, out_path in enumerate(out_paths):
        b = _builder_for(client, args, settings, texts, i)
        if previous_ids:
            b.previous_request_ids(previous_ids[-MAX_STITCH_IDS:])

        info(log, "synth_start", item=i + 1, chars=len(texts[i]), out=str(out_path))
        res: SpeechResponse = await b.execute()
        res.save(out_path, as_wav=args.wav and res.format.codec != "mp3")

        if res.request_id:
            previous_ids.append(res.request_id)
        results.append({
            "out": str(out_path),
            "bytes": out_path.stat().st_size,
            "format": res.format.value,
            "request_id": res.request_id,
        })
    return results


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Returns:
        0 on success, 1 if a request failed.
    """
    args = _parse_args(argv)

    if args.voices:
        for voice in Voice:
            print(f"{voice.value:<8} {voice.voice_id}")
        return 0

    configure_logging()
    log = get_logger("xi-tts.cli")
    set_request_id(str(uuid4())[:12])

    settings = _load_cli_settings(args.settings)
    try:
        client = SpeechClient.from_settings(settings)
    except ConfigValidationError as e:
        raise SystemExit(f"Invalid settings: {e}")

    texts = _load_texts(args)

    try:
        if args.dry_run:
            items = []
            for i in range(len(texts)):
                request = _builder_for(client, args, settings, texts, i).build()
                items.append({
                    "url": str(client.build_url(request)),
                    "body": SpeechRequestJson.from_request(request).to_wire(),
                })
            payload = {"ok": True, "dry_run": True, "items": items}
            if args.json:
                print(json.dumps(payload, ensure_ascii=False))
            else:
                info(log, "dry_run", items=len(texts), voice=args.voice or settings.default_voice)
                print(payload)
            print("DRY_RUN_OK")
            return 0

        fmt = _setting_choice(AudioFormat, args.output_format or settings.default_output_format, "speech.output_format")
        extension = "wav" if args.wav and fmt.codec != "mp3" else fmt.file_extension
        out_paths = _resolve_output_paths(args, len(texts), extension)
        results = asyncio.run(_synthesize_all(client, args, settings, texts, out_paths))
    except TTSError as e:
        if args.json:
            print(json.dumps(e.to_dict(), ensure_ascii=False, default=str))
        else:
            print(f"[FAILED] {e}")
        return 1

    payload = {"ok": True, "dry_run": False, "items": results}
    if args.json:
        print(json.dumps(payload, ensure_ascii=False))
    else:
        print(payload)
    print("CLI_OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
