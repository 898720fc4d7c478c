"""glyphscramble: run a scramble effect over text in the terminal."""

from __future__ import annotations

import argparse
import asyncio
import os
import random
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich.console import Console
from rich.live import Live
from rich.text import Text

from glyphscramble.colors import palette_registry
from glyphscramble.config import DEFAULT_CHAR_SET, EffectConfig, EffectKind, load_optional_config, resolve_config
from glyphscramble.engine import create_effect
from glyphscramble.grid import Surface, generate_random_text
from glyphscramble.render import Frame, frame_to_text
from glyphscramble.timers import ManualTimerHost

DEFAULT_TEXT = "this content is encrypted"
LOG_LEVEL_ENV = "GLYPHSCRAMBLE_LOG_LEVEL"


def configure_logging(level: str) -> None:
    """Send glyphscramble logs to stderr at ``level``."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="{time:HH:mm:ss.SSS} | {level: <8} | {name}:{function} - {message} {extra}",
    )
    logger.enable("glyphscramble")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="glyphscramble",
        description="Overlay text with randomized decrypting glyph effects.",
    )
    parser.add_argument(
        "effect",
        nargs="?",
        default=EffectKind.SPOT_PULSE.value,
        choices=[kind.value for kind in EffectKind],
        help="effect variant (default: %(default)s)",
    )
    parser.add_argument("text", nargs="?", help="text to scramble (default: stdin or a sample line)")
    parser.add_argument("--file", type=Path, help="read the source text from a file")
    parser.add_argument("--random-text", type=int, metavar="N", help="scramble N random glyphs instead of text")
    parser.add_argument("--width", type=int, default=320, help="surface width in pixels (default: %(default)s)")
    parser.add_argument("--height", type=int, default=120, help="surface height in pixels (default: %(default)s)")
    parser.add_argument("--config", type=Path, help="YAML file with effect options")
    parser.add_argument("--palette", choices=palette_registry.names(), help="named color palette")
    parser.add_argument("--seed", type=int, help="seed for reproducible runs")
    parser.add_argument("--frames", type=int, metavar="N", help="print N ticks offline instead of animating")
    parser.add_argument("--duration", type=float, default=10.0, help="seconds to animate (default: %(default)s)")
    parser.add_argument(
        "--log-level",
        default=os.getenv(LOG_LEVEL_ENV, "WARNING"),
        help=f"log level for stderr (default: ${LOG_LEVEL_ENV} or WARNING)",
    )
    return parser


def _read_source(args: argparse.Namespace, parser: argparse.ArgumentParser, rng: random.Random) -> str:
    if args.random_text is not None:
        return generate_random_text(args.random_text, DEFAULT_CHAR_SET, rng)
    if args.file is not None:
        try:
            return args.file.read_text(encoding="utf-8")
        except OSError as e:
            parser.error(f"cannot read {args.file}: {e.strerror or e}")
    if args.text is not None:
        return args.text
    if not sys.stdin.isatty():
        return sys.stdin.read()
    return DEFAULT_TEXT


def _effect_config(args: argparse.Namespace, kind: EffectKind) -> EffectConfig:
    config = load_optional_config(args.config, kind)
    if args.palette:
        options = config.model_dump(exclude_unset=True)
        options["colors"] = args.palette
        config = resolve_config(type(config), options)
    return config


def run_offline(
    kind: EffectKind,
    text: str,
    surface: Surface,
    config: EffectConfig,
    frames: int,
    seed: Optional[int],
    console: Console,
) -> List[Frame]:
    """Drive the effect on a virtual clock and print ``frames`` ticks."""
    timers = ManualTimerHost()
    effect = create_effect(kind, text, surface, config, timers=timers, seed=seed)
    rendered: List[Frame] = []
    try:
        for index in range(frames):
            timers.advance(config.update_interval)
            rendered.append(effect.last_frame)
            if index:
                console.print()
            console.print(frame_to_text(effect.last_frame))
    finally:
        effect.stop()
    return rendered


async def run_live(
    kind: EffectKind,
    text: str,
    surface: Surface,
    config: EffectConfig,
    duration: float,
    seed: Optional[int],
    console: Console,
) -> None:
    """Animate the effect until ``duration`` elapses, then print the original text."""
    restored: List[str] = []
    with Live(Text(), console=console, refresh_per_second=30, transient=True) as live:
        effect = create_effect(
            kind,
            text,
            surface,
            config,
            seed=seed,
            on_frame=lambda frame: live.update(frame_to_text(frame)),
            on_restore=restored.append,
        )
        try:
            await asyncio.sleep(duration)
        finally:
            effect.stop()
    for original in restored:
        console.print(Text(original))


def _main_impl(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    kind = EffectKind(args.effect)
    rng = random.Random(args.seed)
    text = _read_source(args, parser, rng)
    surface = Surface(width_px=args.width, height_px=args.height)
    config = _effect_config(args, kind)
    console = Console()

    if args.frames is not None:
        run_offline(kind, text, surface, config, args.frames, args.seed, console)
        return
    asyncio.run(run_live(kind, text, surface, config, args.duration, args.seed, console))


def main(argv: Optional[List[str]] = None) -> None:
    try:
        _main_impl(argv)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
