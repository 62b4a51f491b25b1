"""Command-line interface for flakegen.

    flakegen <name> <language> [-p <packages>] [-d <description>]

The first two arguments are always taken as name and language, exactly as
given. Only what follows them is parsed as flags. The rendered flake goes to
stdout and nothing else does: diagnostics, usage and errors go to stderr.

Exit codes:
    0  flake written to stdout
    1  any failure (usage, flags, configuration, templates)
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import NoReturn

import logfire

from flakegen import __version__
from flakegen.config import FlakegenSettings, get_settings
from flakegen.errors import FlagParseError, FlakegenError, UsageError
from flakegen.nix_gen.generator import generate_flake
from flakegen.nix_gen.host import nix_system
from flakegen.nix_gen.models import DEFAULT_DESCRIPTION, FlakeDescriptor
from flakegen.nix_gen.packages import resolve_packages, split_packages

logger = logging.getLogger(__name__)

PROG = "flakegen"
USAGE = "{prog} <name> <language> [-p packages] [-d description]"


@dataclass
class CliArgs:
    """Parsed command line, before package resolution."""

    name: str
    language: str
    packages: list[str] = field(default_factory=list)
    description: str = DEFAULT_DESCRIPTION


class _FlagParser(argparse.ArgumentParser):
    """ArgumentParser that raises FlagParseError instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise FlagParseError(f"{self.prog}: {message}")


def _build_parser(prog: str) -> _FlagParser:
    parser = _FlagParser(
        prog=prog,
        usage=USAGE.format(prog=prog),
        description="Generate a Nix dev-shell flake and write it to stdout.",
    )
    parser.add_argument(
        "-p",
        "--packages",
        default="",
        help="comma-separated list of extra nixpkgs packages",
    )
    parser.add_argument(
        "-d",
        "--description",
        default="",
        help=f'flake description (default: "{DEFAULT_DESCRIPTION}")',
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    return parser


def parse_args(argv: list[str], prog: str = PROG) -> CliArgs:
    """Parse `<name> <language> [flags...]`.

    Args:
        argv: Arguments without the program name.
        prog: Program name shown in usage and error messages.

    Returns:
        CliArgs with packages split and the description defaulted.

    Raises:
        UsageError: Fewer than two arguments were given.
        FlagParseError: The flags after name and language are malformed.
    """
    parser = _build_parser(prog)

    if len(argv) < 2:
        if argv and argv[0] in ("-h", "--help", "--version"):
            parser.parse_args(argv[:1])  # prints and exits 0
        raise UsageError(f"Usage: {USAGE.format(prog=prog)}")

    name, language, *flag_args = argv
    # Intermixed so strays on either side of a flag all land in ns.extra.
    ns = parser.parse_intermixed_args(flag_args)

    if ns.extra:
        logger.warning("Ignoring unexpected arguments: %s", " ".join(ns.extra))

    return CliArgs(
        name=name,
        language=language,
        packages=split_packages(ns.packages),
        description=ns.description or DEFAULT_DESCRIPTION,
    )


def build_descriptor(args: CliArgs, settings: FlakegenSettings) -> FlakeDescriptor:
    """Assemble the immutable FlakeDescriptor for one render."""
    return FlakeDescriptor(
        name=args.name,
        description=args.description,
        packages=resolve_packages(args.packages, args.language),
        platform=settings.system or nix_system(),
        language=args.language,
        nixpkgs_url=settings.nixpkgs_url,
    )


def configure_observability(settings: FlakegenSettings) -> None:
    """Set up stderr logging and Logfire.

    Logfire's console exporter is disabled: it writes to stdout, which is
    reserved for the flake.
    """
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=settings.log_level,
        stream=sys.stderr,
    )
    logfire_token = settings.logfire_token
    logfire.configure(
        token=logfire_token.get_secret_value() if logfire_token else None,
        send_to_logfire="if-token-present",
        console=False,
        service_name="flakegen",
        service_version=__version__,
    )


def main(argv: list[str] | None = None) -> int:
    """Run flakegen and return the process exit code.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].
    """
    if argv is None:
        argv = sys.argv[1:]

    try:
        settings = get_settings()
        configure_observability(settings)

        with logfire.span("flakegen.generate", argv=argv):
            args = parse_args(argv)
            descriptor = build_descriptor(args, settings)
            logger.info(
                "Generating flake for '%s' (%s) on %s",
                descriptor.name,
                descriptor.language,
                descriptor.platform,
            )
            flake = generate_flake(descriptor)
    except FlakegenError as e:
        logger.debug("flakegen failed: %s", type(e).__name__)
        print(e, file=sys.stderr)
        return e.exit_code

    sys.stdout.write(flake)
    return 0
