"""Command line entry point: parse options, load a scene and render it to a file."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from pathtracer.integrators import create_integrator
from pathtracer.renderer import Renderer
from pathtracer.scene import Scene

logger = logging.getLogger(__name__)

USAGE = "CLI parser: --scene --save --depth --spp --gui"


class ArgsError(Exception):
    """A command line argument was not understood."""

    def __init__(self, argument: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"unknown argument {argument}")
        self.argument = argument


@dataclass
class CliOptions:
    scene_geometry_path: str = ""
    scene_material_path: str = ""
    integrator: str = "IndirectIlluminationIntegrator"
    save_path: str = "../Renders/image.jpeg"
    spp: int = 64
    depth: int = 4
    with_gui: bool = False


def _value(args: Iterator[str], flag: str) -> str:
    try:
        return next(args)
    except StopIteration:
        raise ArgsError(flag, f"missing value for {flag}") from None


def _int_value(args: Iterator[str], flag: str) -> int:
    text = _value(args, flag)
    try:
        return int(text)
    except ValueError:
        raise ArgsError(flag, f"{flag} expects an integer, got {text!r}") from None


def parse_args(argv: Sequence[str]) -> CliOptions:
    """Parse arguments (without the program name) into options."""
    options = CliOptions()
    args = iter(argv)
    for arg in args:
        if arg == "--scene":
            options.scene_geometry_path = _value(args, arg)
            options.scene_material_path = _value(args, arg)
        elif arg == "--save":
            options.save_path = _value(args, arg)
        elif arg == "--depth":
            options.depth = _int_value(args, arg)
        elif arg == "--spp":
            options.spp = _int_value(args, arg)
        elif arg == "--gui":
            options.with_gui = True
        elif arg == "--integrator":
            options.integrator = _value(args, arg)
        else:
            raise ArgsError(arg)
    return options


def usage() -> str:
    """Log and return the list of accepted options."""
    logger.info(USAGE)
    return USAGE


def main(argv: Optional[Sequence[str]] = None) -> int:
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.DEBUG, format="[%(levelname)s] %(message)s")
    if argv is None:
        argv = sys.argv[1:]
    try:
        options = parse_args(argv)
    except ArgsError as exc:
        logger.error("CLI parser: %s", exc)
        usage()
        return 0

    if options.with_gui:
        logger.error("Interactive display is not available; rendering to file instead")
    try:
        scene = Scene(options.scene_geometry_path, options.scene_material_path)
        renderer = Renderer(create_integrator(options.integrator, scene, options.depth))
        renderer.render(options.spp, options.save_path)
    except (RuntimeError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())