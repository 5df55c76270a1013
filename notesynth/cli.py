from __future__ import annotations

import argparse
import logging

from rich.console import Console
from rich.table import Table

from .audio import DEFAULT_SAMPLE_RATE
from .config import SynthesisRequest, parse_request
from .demo import demo_request
from .logging_utils import configure_logging, debug_enabled, log_exception
from .notation import parse_notes
from .playback import PlaybackHandle, get_default_backend
from .spinner import Spinner, render_error
from .synth import DURATION_UNIT_SECONDS, render
from .waveforms import WAVEFORM_NAMES

_LOGGER = logging.getLogger("notesynth.cli")
_CONSOLE = Console()


def _add_render_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--speed", type=float, default=1.0)
    parser.add_argument("--volume", type=float, default=1.0)
    parser.add_argument("--pitch-shift", type=float, default=0.0, help="Semitones.")
    parser.add_argument("--sample-rate", type=int, default=None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notesynth")
    sub = parser.add_subparsers(dest="command", required=True)

    play = sub.add_parser("play", help="Play a single part.")
    play.add_argument("notes", type=str)
    play.add_argument("--waveform", choices=WAVEFORM_NAMES, default="sine")
    play.add_argument("--part-volume", type=float, default=1.0)
    play.add_argument("--fade", type=float, default=0.0)
    _add_render_options(play)

    demo = sub.add_parser("demo", help="Play the built-in three-part demo.")
    demo.add_argument("--sample-rate", type=int, default=None)

    inspect = sub.add_parser("inspect", help="Show how a note string is parsed.")
    inspect.add_argument("notes", type=str)
    inspect.add_argument("--speed", type=float, default=1.0)
    inspect.add_argument("--pitch-shift", type=float, default=0.0)
    return parser


def _sample_rate(requested: int | None) -> int:
    if requested is not None:
        return requested
    return get_default_backend().default_sample_rate


def _play(request: SynthesisRequest) -> None:
    rendered = render(request)
    with Spinner(f"Playing {rendered.duration:.1f}s of audio"):
        handle: PlaybackHandle = rendered.play()
        try:
            while not handle.wait(timeout=0.1) and not handle.stopped:
                pass
        except KeyboardInterrupt:
            handle.stop()
            _CONSOLE.print("Stopped.")
            return
    _CONSOLE.print(f"Played {rendered.duration:.2f}s (sr={rendered.sample_rate})")


def _inspect(notes: str, *, speed: float, pitch_shift: float) -> None:
    parsed = parse_notes(notes, speed=speed, pitch_shift=pitch_shift)
    table = Table("#", "Hz", "Units", "Seconds")
    for index, event in enumerate(parsed.events):
        label = "rest" if event.is_rest else f"{event.frequency:.2f}"
        table.add_row(
            str(index),
            label,
            f"{event.duration:g}",
            f"{event.duration * DURATION_UNIT_SECONDS:.3f}",
        )
    _CONSOLE.print(table)
    _CONSOLE.print(f"{len(parsed.events)} event(s), {parsed.skipped} character(s) skipped")


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    try:
        parser = build_parser()
        args = parser.parse_args(argv)

        if args.command == "inspect":
            _inspect(args.notes, speed=args.speed, pitch_shift=args.pitch_shift)
            return 0

        if args.command == "play":
            request = parse_request(
                {
                    "sample_rate": _sample_rate(args.sample_rate),
                    "speed": args.speed,
                    "volume": args.volume,
                    "pitch_shift": args.pitch_shift,
                    "parts": {
                        "part": {
                            "notes": args.notes,
                            "waveform": args.waveform,
                            "volume": args.part_volume,
                            "fade": args.fade,
                        }
                    },
                }
            )
            _play(request)
            return 0

        if args.command == "demo":
            _play(demo_request(_sample_rate(args.sample_rate)))
            return 0

        parser.print_help()
        return 1
    except Exception as exc:
        _LOGGER.warning("notesynth CLI failed: %s", exc, exc_info=debug_enabled())
        log_exception("notesynth CLI", exc)
        render_error("notesynth CLI", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
