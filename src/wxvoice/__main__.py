"""wxvoice command line entry points.

Usage:
    weather ICAO [-f STYLE]
    speak-weather {espeak,google,text} ICAO [-f STYLE] [-a FORMAT] [-o PATH]
    python -m wxvoice ...   (same as speak-weather)
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from . import __version__
from .announce import AnnouncementStyle
from .audio import (
    AudioFormat,
    CommandPlayback,
    SoxEncoder,
    Transcoder,
    allocate_output_path,
    with_extension,
)
from .config import WxVoiceConfig
from .config.loader import load_config
from .errors import ConfigError, OutputError, WxVoiceError
from .feed import AviationWeatherClient
from .pipeline import CancellationToken, WeatherPipeline
from .tts import VOICE_PRESETS, Engine, VoiceParameters, create_synthesizer

STYLE_CHOICES = [style.value for style in AnnouncementStyle]
FORMAT_CHOICES = [fmt.value for fmt in AudioFormat] + ["mulaw"]

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def report_error(error: WxVoiceError, stage: str | None = None) -> int:
    """Print the one-line diagnostic and return the failure exit code."""
    print(f"error: [{stage or error.stage}] {error.kind}: {error}", file=sys.stderr)
    return 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("icao", metavar="ICAO", help="ICAO station identifier (e.g. KSJC)")
    parser.add_argument(
        "-f",
        "--format",
        dest="style",
        choices=STYLE_CHOICES,
        help="Announcement style (default: from config, normally speech)",
    )
    parser.add_argument(
        "--metar",
        metavar="RAW",
        help="Use this raw report instead of fetching one",
    )
    parser.add_argument("--config", type=Path, metavar="PATH", help="Path to YAML config file")
    parser.add_argument(
        "--profile",
        choices=["dev", "prod", "test"],
        help="Configuration profile to use",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Override the configured log level",
    )


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="PATH",
        help="Save to this file instead of playing",
    )
    parser.add_argument(
        "-a",
        "--audio-format",
        choices=FORMAT_CHOICES,
        help="Audio format (default: wav for espeak, mp3 for google)",
    )
    parser.add_argument(
        "--endpoint",
        metavar="NODE",
        help="Playback endpoint, e.g. an Asterisk node number",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Timeout for the speech engine call",
    )


def build_weather_parser() -> argparse.ArgumentParser:
    """Build the parser for the `weather` command."""
    parser = argparse.ArgumentParser(
        prog="weather",
        description="Print the current aviation weather for a station",
    )
    _add_common_arguments(parser)
    parser.add_argument("--version", action="version", version=f"wxvoice v{__version__}")
    return parser


def build_speak_parser() -> argparse.ArgumentParser:
    """Build the parser for the `speak-weather` command."""
    parser = argparse.ArgumentParser(
        prog="speak-weather",
        description="Speak the current aviation weather for a station",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  speak-weather espeak KSJC                          # Play through the playback command
  speak-weather google KSJC -f aviation -a ulaw -o wx.ulaw
  speak-weather text KSJC -f detailed                # Print the announcement

Environment:
  GOOGLE_CLOUD_API_KEY   API key for the google engine (read from .env too)
  WXVOICE_PROFILE        Set profile (dev, prod, test)
""",
    )
    parser.add_argument("--version", action="version", version=f"wxvoice v{__version__}")
    engines = parser.add_subparsers(dest="engine", required=True, metavar="ENGINE")

    espeak = engines.add_parser("espeak", help="Local eSpeak engine")
    _add_common_arguments(espeak)
    _add_output_arguments(espeak)
    espeak.add_argument("-v", "--voice", help="Voice preset or eSpeak voice name")
    espeak.add_argument("-s", "--speed", type=int, help="Words per minute (default: 120)")
    espeak.add_argument("-p", "--pitch", type=int, help="Pitch, 0-99 (default: 50)")
    espeak.add_argument("-g", "--gap", type=int, help="Gap between words in 10ms units (default: 15)")

    google = engines.add_parser("google", help="Google Cloud Text-to-Speech")
    _add_common_arguments(google)
    _add_output_arguments(google)
    google.add_argument("-v", "--voice", help=f"Voice preset ({', '.join(VOICE_PRESETS)}) or Google voice name")
    google.add_argument("--rate", type=float, help="Speaking rate, 0.25-4.0 (default: 1.0)")
    google.add_argument("--pitch", type=float, help="Pitch in semitones, -20 to 20")

    text = engines.add_parser("text", help="Print the announcement text only")
    _add_common_arguments(text)
    text.add_argument("-o", "--output", type=Path, metavar="PATH", help="Write the text to this file")

    return parser


def load_settings(args: argparse.Namespace) -> WxVoiceConfig:
    """Load config and set up logging for a parsed command line."""
    config = load_config(path=args.config, profile=args.profile)
    setup_logging(args.log_level or config.logging.level)
    return config


def fetch_report(args: argparse.Namespace, config: WxVoiceConfig) -> tuple[str, str | None]:
    """Return (raw report, station name) from --metar or the feed."""
    if args.metar:
        return args.metar, None

    client = AviationWeatherClient(
        url=config.feed.url,
        timeout=config.feed.timeout,
        user_agent=config.feed.user_agent,
    )
    report = client.fetch(args.icao)
    return report.raw, report.name


def build_voice(args: argparse.Namespace, config: WxVoiceConfig, engine: Engine) -> VoiceParameters:
    """Build voice parameters from config defaults and command line options."""
    if engine == Engine.ESPEAK:
        extensions = {
            "words_per_minute": args.speed if args.speed is not None else config.espeak.words_per_minute,
            "pitch": args.pitch if args.pitch is not None else config.espeak.pitch,
            "gap": args.gap if args.gap is not None else config.espeak.gap,
        }
        if config.espeak.amplitude is not None:
            extensions["amplitude"] = config.espeak.amplitude
        return VoiceParameters(voice=args.voice or config.espeak.voice, extensions=extensions)

    extensions = {}
    pitch = args.pitch if args.pitch is not None else config.google.pitch
    if pitch is not None:
        extensions["pitch"] = pitch
    return VoiceParameters(
        voice=args.voice or config.google.voice,
        rate=args.rate if args.rate is not None else config.google.rate,
        extensions=extensions,
    )


def run_weather(argv: list[str] | None = None) -> int:
    """Fetch, decode and print the announcement text for a station."""
    args = build_weather_parser().parse_args(argv)

    try:
        config = load_settings(args)
        style = AnnouncementStyle.parse(args.style or config.announcement.style)
    except ValueError as e:
        return report_error(ConfigError(str(e)))
    except WxVoiceError as e:
        return report_error(e)

    try:
        raw, name = fetch_report(args, config)
    except WxVoiceError as e:
        return report_error(e)

    result = WeatherPipeline().run(raw, style, station_name=name)
    if result.error is not None:
        return report_error(result.error, result.stage)

    print(result.text)
    return 0


def run_speak(argv: list[str] | None = None) -> int:
    """Speak the weather for a station, or save it to a file."""
    args = build_speak_parser().parse_args(argv)

    try:
        config = load_settings(args)
        raw, name = fetch_report(args, config)
    except WxVoiceError as e:
        return report_error(e)

    try:
        style = AnnouncementStyle.parse(args.style or config.announcement.style)
    except ValueError as e:
        return report_error(ConfigError(str(e)))

    if args.engine == "text":
        return _speak_text(raw, style, name, args.output)

    engine = Engine.parse(args.engine)
    if args.timeout is not None:
        config.espeak.timeout = args.timeout
        config.google.timeout = args.timeout

    engine_config = config.espeak if engine == Engine.ESPEAK else config.google
    try:
        audio_format = AudioFormat.parse(args.audio_format or engine_config.default_format)
    except ValueError as e:
        return report_error(ConfigError(str(e)))

    pipeline = WeatherPipeline(
        synthesizer=create_synthesizer(engine, config),
        transcoder=Transcoder(SoxEncoder(config.audio.sox_command, config.audio.sox_timeout)),
        file_mode=config.audio.file_mode,
    )
    voice = build_voice(args, config, engine)
    cancel = CancellationToken(timeout=config.pipeline.deadline_seconds)

    if args.output is not None:
        path = with_extension(args.output, audio_format)
        result = pipeline.run(
            raw,
            style,
            voice=voice,
            audio_format=audio_format,
            output_path=path,
            cancel=cancel,
            station_name=name,
        )
        if result.error is not None:
            return report_error(result.error, result.stage)
        print(f"Audio saved to: {result.output_path}")
        return 0

    # No output file: play from a temporary file. Once handed to playback the
    # file belongs to the playback system, which may still be queueing it.
    path = allocate_output_path(audio_format, directory=config.audio.output_dir)
    result = pipeline.run(
        raw,
        style,
        voice=voice,
        audio_format=audio_format,
        output_path=path,
        cancel=cancel,
        station_name=name,
    )
    if result.error is not None:
        path.unlink(missing_ok=True)
        return report_error(result.error, result.stage)

    player = CommandPlayback(config.playback.command, timeout=config.playback.timeout)
    try:
        player.play_file(path, endpoint=args.endpoint or config.playback.endpoint)
    except WxVoiceError as e:
        path.unlink(missing_ok=True)
        return report_error(e)

    logger.info(f"Handed {path} to playback")
    return 0


def _speak_text(raw: str, style: AnnouncementStyle, name: str | None, output: Path | None) -> int:
    result = WeatherPipeline().run(raw, style, station_name=name)
    if result.error is not None:
        return report_error(result.error, result.stage)

    if output is None:
        print(result.text)
        return 0

    try:
        output.write_text(result.text + "\n")
    except OSError as e:
        return report_error(OutputError(f"failed to write {output}: {e}"))
    print(f"Text saved to: {output}")
    return 0


def _load_env() -> None:
    """Load .env from the project root, else from the working directory."""
    env_file = Path(__file__).parent.parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)
    else:
        load_dotenv()


def weather_main() -> None:
    """Console script entry point for `weather`."""
    _load_env()
    sys.exit(run_weather())


def main() -> None:
    """Console script entry point for `speak-weather`."""
    _load_env()
    sys.exit(run_speak())


if __name__ == "__main__":
    main()
