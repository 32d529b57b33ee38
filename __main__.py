"""CLI entry point for kroki-render.

This module acts as the central entry point for the project's CLI tools.
Run from the repository root with ``python . <command>``.
"""

import argparse
import sys
from pathlib import Path

import httpx
from dotenv import load_dotenv

from kroki.config import (
    EnvVar,
    get_environment,
    get_environment_info,
    get_kroki_endpoint,
    list_environment_variables,
)
from kroki.core import get_logger, setup_logging
from kroki.core.log import parse_level
from kroki.diagram import Diagram, DiagramType
from kroki.encoding import decode_payload, encode_payload
from kroki.render import RenderError, build_uri, render

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


def _read_source(path: Path | None) -> str:
    """Read diagram source from a file, or stdin when path is None or '-'."""
    if path is None or str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "kind",
        type=str,
        help="Diagram kind (e.g. plantuml, graphviz, mermaid)",
    )
    parser.add_argument(
        "source",
        type=Path,
        nargs="?",
        default=None,
        help="Diagram source file (default: stdin)",
    )
    parser.add_argument(
        "--format",
        "-f",
        type=str,
        default="svg",
        help="Output format (default: svg)",
    )
    parser.add_argument(
        "--endpoint",
        "-e",
        type=str,
        default=None,
        help="Kroki base URI (default: KROKI_ENDPOINT or https://kroki.io)",
    )


# =============================================================================
# Render Command
# =============================================================================


def _is_same_file(a: Path, b: Path) -> bool:
    return a.resolve() == b.resolve()


def cmd_render(args: argparse.Namespace) -> int:
    """Render a diagram source through Kroki."""
    reads_file = args.source is not None and str(args.source) != "-"
    output = args.output
    if output is None and reads_file:
        output = args.source.with_suffix(f".{args.format}")

    writes_file = output is not None and str(output) != "-"
    if reads_file and writes_file and _is_same_file(output, args.source):
        logger.error(
            f"Refusing to overwrite diagram source {args.source}; "
            "pass a different --output"
        )
        return 1

    try:
        diagram = Diagram(args.kind, _read_source(args.source))
    except ValueError as e:
        logger.error(str(e))
        return 1
    if diagram.diagram_type is None:
        logger.warning(f"'{args.kind}' is not a known Kroki diagram kind")

    try:
        image = render(diagram, args.format, endpoint=args.endpoint)
    except RenderError as e:
        logger.error(str(e))
        return 1
    except httpx.HTTPStatusError as e:
        logger.error(f"Kroki returned {e.response.status_code}: {e.response.text}")
        return 1
    except httpx.RequestError as e:
        logger.error(f"Kroki request failed: {e}")
        return 1

    if writes_file:
        output.write_bytes(image)
        logger.info(f"Rendered to: {output} ({len(image)} bytes)")
    else:
        sys.stdout.buffer.write(image)
        sys.stdout.buffer.flush()
    return 0


def handle_render_command(argv: list[str]) -> int:
    """Handle render command argument parsing."""
    parser = argparse.ArgumentParser(
        prog="python . render",
        description="Render a diagram to an image via Kroki",
    )
    _add_source_arguments(parser)
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path, '-' for stdout "
        "(default: source path with the format's suffix, or stdout)",
    )

    args = parser.parse_args(argv)
    return cmd_render(args)


# =============================================================================
# URL Command
# =============================================================================


def cmd_url(args: argparse.Namespace) -> int:
    """Print the Kroki GET URL for a diagram source."""
    try:
        diagram = Diagram(args.kind, _read_source(args.source))
    except ValueError as e:
        logger.error(str(e))
        return 1
    print(build_uri(diagram, args.format, args.endpoint))
    return 0


def handle_url_command(argv: list[str]) -> int:
    """Handle url command argument parsing."""
    parser = argparse.ArgumentParser(
        prog="python . url",
        description="Print the Kroki URL for a diagram without requesting it",
    )
    _add_source_arguments(parser)

    args = parser.parse_args(argv)
    return cmd_url(args)


# =============================================================================
# Encode / Decode Commands
# =============================================================================


def cmd_encode(args: argparse.Namespace) -> int:
    """Print the encoded payload for a diagram source."""
    print(encode_payload(_read_source(args.source)))
    return 0


def cmd_decode(args: argparse.Namespace) -> int:
    """Print the diagram source contained in an encoded payload."""
    try:
        source = decode_payload(args.token)
    except ValueError as e:
        logger.error(str(e))
        return 1
    sys.stdout.write(source)
    return 0


def handle_encode_command(argv: list[str]) -> int:
    """Handle encode command argument parsing."""
    parser = argparse.ArgumentParser(
        prog="python . encode",
        description="Encode a diagram source as a Kroki payload",
    )
    parser.add_argument(
        "source",
        type=Path,
        nargs="?",
        default=None,
        help="Diagram source file (default: stdin)",
    )

    args = parser.parse_args(argv)
    return cmd_encode(args)


def handle_decode_command(argv: list[str]) -> int:
    """Handle decode command argument parsing."""
    parser = argparse.ArgumentParser(
        prog="python . decode",
        description="Decode a Kroki payload back to diagram source",
    )
    parser.add_argument("token", type=str, help="Encoded payload")

    args = parser.parse_args(argv)
    return cmd_decode(args)


# =============================================================================
# Env Command
# =============================================================================


def cmd_env(args: argparse.Namespace) -> int:
    """Show configuration variables and their resolved values."""
    print("Environment Variables:")
    for var in list_environment_variables(args.category):
        info = get_environment_info(var)
        value = get_environment(var)
        print(f"  {info.name:<18} = {value!s:<24} # {info.description}")
    print("")
    print(f"Resolved endpoint: {get_kroki_endpoint()}")
    return 0


def cmd_kinds(_args: argparse.Namespace) -> int:
    """List known diagram kinds."""
    for kind in DiagramType:
        print(kind.value)
    return 0


def handle_env_command(argv: list[str]) -> int:
    """Handle env command argument parsing."""
    parser = argparse.ArgumentParser(
        prog="python . env",
        description="Show kroki-render configuration",
    )
    parser.add_argument(
        "--category",
        "-c",
        type=str,
        default=None,
        choices=["service", "logging"],
        help="Only show variables in this category",
    )

    args = parser.parse_args(argv)
    return cmd_env(args)


def handle_kinds_command(argv: list[str]) -> int:
    """Handle kinds command argument parsing."""
    parser = argparse.ArgumentParser(
        prog="python . kinds",
        description="List diagram kinds known to Kroki",
    )
    args = parser.parse_args(argv)
    return cmd_kinds(args)


# =============================================================================
# Main
# =============================================================================


def show_help() -> None:
    """Print top-level usage."""
    print("Usage: python . <command> [options]")
    print("")
    print("Commands:")
    print("  render KIND [FILE]   Render a diagram through Kroki")
    print("  url KIND [FILE]      Print the Kroki URL for a diagram")
    print("  encode [FILE]        Encode a diagram source as a Kroki payload")
    print("  decode TOKEN         Decode a Kroki payload")
    print("  env                  Show configuration")
    print("  kinds                List known diagram kinds")
    print("")
    print("Environment:")
    print("  KROKI_ENDPOINT       - Kroki service URI (default: https://kroki.io)")
    print("  KROKI_TIMEOUT        - Request timeout in seconds")
    print("  KROKI_LOG_LEVEL      - Log level (default: INFO)")


def main() -> int:
    """Main entry point for the CLI."""
    if len(sys.argv) < 2:
        show_help()
        return 1

    command = sys.argv[1]
    rest_args = sys.argv[2:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    commands = {
        "render": lambda: handle_render_command(rest_args),
        "url": lambda: handle_url_command(rest_args),
        "encode": lambda: handle_encode_command(rest_args),
        "decode": lambda: handle_decode_command(rest_args),
        "env": lambda: handle_env_command(rest_args),
        "kinds": lambda: handle_kinds_command(rest_args),
    }

    if command in commands:
        setup_logging(parse_level(get_environment(EnvVar.KROKI_LOG_LEVEL)))
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
