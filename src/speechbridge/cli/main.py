import json
import random
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..audio.playback import AudioError, list_output_devices, play_wav
from ..audio.wav import duration_seconds, to_wav_bytes
from ..chunking import chunk_text, verify_chunks
from ..core import config as config_module
from ..core.config import Settings
from ..core.logging import log, setup_logging
from ..core.models import RATE_MAX, RATE_MIN, SpeakOptions
from ..tts.driver import synthesize_fragments
from ..tts.engine import SpeechEngine, SynthesisError, VoiceNotFoundError

app = typer.Typer(add_completion=False, help="SpeechBridge: speak text through a local TTS engine")


def _open_engine() -> SpeechEngine:
    return SpeechEngine()


def _stderr_console() -> Console:
    return Console(stderr=True, no_color=config_module.SETTINGS.NO_COLOR, highlight=False)


def _debug_chunk_printer(console: Console):
    def _print(ordinal: int, length: int, content: str) -> None:
        console.print(f"[DEBUG] Chunk #{ordinal}", markup=False)
        console.print(f"Length: {length} characters", markup=False)
        console.print(f'Content: "{content}"', markup=False)
        console.print("----------------------", markup=False)

    return _print


def _join_text(text: list[str] | None) -> str:
    return " ".join(text or []).strip()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config_file: str | None = typer.Option(
        None,
        "--config",
        help="Config file (.speechbridge.yaml auto-discovered)",
    ),
    log_format: str | None = typer.Option(None, "--log-format", help="Log format: json|plain|auto"),
) -> None:
    """Load settings and logging before any command runs."""
    try:
        settings = Settings.load_config(config_file)
    except Exception as e:
        typer.echo(f"❌ Config error: {e}", err=True)
        raise typer.Exit(1) from e

    if log_format:
        settings.LOG_FORMAT = log_format
    config_module.SETTINGS = settings
    setup_logging(settings.LOG_FORMAT)  # type: ignore[arg-type]

    # If no command was provided, show help
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


@app.command()
def version() -> None:
    from .. import __version__

    typer.echo(__version__)


@app.command()
def config() -> None:
    """Show effective settings."""
    for k, v in config_module.SETTINGS.model_dump().items():
        typer.echo(f"{k}={v}")


@app.command()
def speak(
    text: list[str] | None = typer.Argument(None, help="Text to speak; all remaining words are joined"),
    voice: str | None = typer.Option(None, "--voice", "-v", help="Voice name (case-insensitive substring)"),
    rate: int | None = typer.Option(None, "--rate", "-r", help="Speech rate from -10 to 10"),
    volume: int | None = typer.Option(None, "--volume", "-vol", help="Volume from 0 to 100"),
    device: str | None = typer.Option(None, "--device", "-d", help="Output device ID (default: system device)"),
    output: str | None = typer.Option(None, "--output", "-o", help="Save audio to a WAV file instead of playing"),
    random_voice: bool = typer.Option(False, "--random-voice", "-rv", help="Use a random installed voice"),
    random_rate: bool = typer.Option(False, "--random-rate", "-rr", help="Use a random speech rate"),
    chunk_size: int | None = typer.Option(None, "--chunk-size", "-cs", help="Max characters per fragment (default 50)"),
    debug: bool = typer.Option(False, "--debug", "-db", help="Print debug information"),
) -> None:
    """
    Speak text, or save it as a WAV file.

    Some voices cannot handle long text, so it is split into fragments of at
    most --chunk-size characters, synthesized in order and joined.
    """
    settings = config_module.SETTINGS
    options = SpeakOptions(
        voice=voice if voice is not None else settings.SPEECHBRIDGE_VOICE,
        rate=rate if rate is not None else settings.SPEECHBRIDGE_RATE,
        volume=volume if volume is not None else settings.SPEECHBRIDGE_VOLUME,
        device=device if device is not None else settings.SPEECHBRIDGE_DEVICE,
        output=output,
        chunk_size=chunk_size if chunk_size is not None else settings.SPEECHBRIDGE_CHUNK_SIZE,
        random_voice=random_voice,
        random_rate=random_rate,
        debug=debug,
    )
    content = _join_text(text)
    if not content:
        typer.echo("❌ No text to speak", err=True)
        raise typer.Exit(1)

    console = _stderr_console()

    if options.debug:
        setup_logging(settings.LOG_FORMAT, level="debug")  # type: ignore[arg-type]

    try:
        engine = _open_engine()
    except Exception as e:
        typer.echo(f"❌ Cannot start speech engine: {e}", err=True)
        raise typer.Exit(1) from e

    if options.random_voice:
        voices = engine.list_voices()
        if not voices:
            typer.echo("❌ No voices available", err=True)
            raise typer.Exit(1)
        options.voice = random.choice(voices).name
        typer.echo(f"Random voice selected: {options.voice}", err=True)

    if options.random_rate:
        options.rate = random.randint(RATE_MIN, RATE_MAX)
        typer.echo(f"Random rate selected: {options.rate}", err=True)

    if options.debug:
        from .. import __version__

        params = [
            f"Voice: {options.voice or 'default'}",
            f"Rate: {options.rate}",
            f"Volume: {options.volume}",
            f"Output device: {options.device or 'default'}",
            f"Chunk size: {options.chunk_size}",
            f"Version: {__version__}",
        ]
        console.print(Panel(Text("\n".join(params)), title="Synthesis parameters (debug)"))

    if options.voice:
        try:
            engine.select_voice(options.voice)
        except VoiceNotFoundError as e:
            typer.echo(f"❌ {e}", err=True)
            raise typer.Exit(1) from e
    engine.set_rate(options.rate)
    engine.set_volume(options.volume)

    on_chunk = _debug_chunk_printer(console) if options.debug else None
    fragments = chunk_text(content, options.chunk_size, on_chunk=on_chunk)
    if not fragments:
        typer.echo("❌ Could not split text into fragments", err=True)
        raise typer.Exit(1)

    log.info("cli.speak.start", fragments=len(fragments), chunk_size=options.chunk_size)

    try:
        fmt, frames = synthesize_fragments(engine, fragments)
    except SynthesisError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e

    wav_bytes = to_wav_bytes(fmt, frames)

    if options.output:
        try:
            Path(options.output).write_bytes(wav_bytes)
        except OSError as e:
            typer.echo(f"❌ Cannot write {options.output}: {e}", err=True)
            raise typer.Exit(1) from e
        typer.echo(f"Audio saved to file: {options.output}")
    else:
        try:
            play_wav(wav_bytes, options.device)
        except AudioError as e:
            typer.echo(f"❌ {e}", err=True)
            raise typer.Exit(1) from e

    log.info(
        "cli.speak.done",
        fragments=len(fragments),
        seconds=duration_seconds(fmt, frames),
        output=options.output,
    )


@app.command()
def chunk(
    text: list[str] | None = typer.Argument(None, help="Text to split; all remaining words are joined"),
    chunk_size: int | None = typer.Option(None, "--chunk-size", "-cs", help="Max characters per fragment (default 50)"),
    json_output: bool = typer.Option(False, "--json", help="Output fragments as a JSON list"),
    verify: bool = typer.Option(False, "--verify", help="Check fragments and fail on violations"),
    debug: bool = typer.Option(False, "--debug", "-db", help="Print each fragment with its length"),
) -> None:
    """Show how text would be split into fragments, without speaking it."""
    settings = config_module.SETTINGS
    size = SpeakOptions(
        chunk_size=chunk_size if chunk_size is not None else settings.SPEECHBRIDGE_CHUNK_SIZE
    ).chunk_size

    content = _join_text(text)
    if not content:
        typer.echo("❌ No text to split", err=True)
        raise typer.Exit(1)

    on_chunk = _debug_chunk_printer(_stderr_console()) if debug else None
    fragments = chunk_text(content, size, on_chunk=on_chunk)

    if json_output:
        typer.echo(json.dumps(fragments, ensure_ascii=False))
    else:
        for fragment in fragments:
            typer.echo(fragment)

    if verify:
        report = verify_chunks(content, fragments, size)
        typer.echo(json.dumps(report, indent=2, ensure_ascii=False), err=True)
        if not report["passed"]:
            typer.echo("❌ Chunk verification failed", err=True)
            raise typer.Exit(1)


@app.command()
def voices(
    json_output: bool = typer.Option(False, "--json", help="Output voices as JSON"),
) -> None:
    """List installed voices with gender and language."""
    try:
        engine = _open_engine()
    except Exception as e:
        typer.echo(f"❌ Cannot start speech engine: {e}", err=True)
        raise typer.Exit(1) from e

    installed = engine.list_voices()
    if json_output:
        typer.echo(json.dumps([v.model_dump() for v in installed], indent=2, ensure_ascii=False))
        return

    for v in installed:
        language = ", ".join(v.languages) or "Unknown"
        typer.echo(f"{v.name} -- {v.gender}, {language}")


@app.command()
def devices(
    json_output: bool = typer.Option(False, "--json", help="Output devices as JSON"),
) -> None:
    """List audio output devices."""
    try:
        outputs = list_output_devices()
    except Exception as e:
        typer.echo(f"❌ Cannot query audio devices: {e}", err=True)
        raise typer.Exit(1) from e

    if json_output:
        typer.echo(json.dumps([d.model_dump() for d in outputs], indent=2, ensure_ascii=False))
        return

    for d in outputs:
        marker = " (default)" if d.is_default else ""
        typer.echo(f"{d.index} -- {d.name}{marker}")


if __name__ == "__main__":
    app()
