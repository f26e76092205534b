"""
Illustrator Exec MCP – CLI Management Tool.

Commands:
  serve                          Start MCP server (stdio)
  run   (--file F | --code C)    Execute a script body and print the response
  wrap  (--file F | --code C)    Print the wrapped JSX (or --command line) without running it
  check                          Confirm osascript can reach Illustrator

Output meant for the operator goes to stdout; logging goes to stderr.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import illustrator_osa as osa
from jsx_codec import wrap_script

log = logging.getLogger("manage")


def _configure_logging(level: str | None = None):
    """Send logging to stderr; stdout is reserved for the stdio transport."""
    level = level or os.environ.get("ILLUSTRATOR_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_code(args) -> str | None:
    """Return the script body from --code or --file, or None if the file is missing."""
    if args.code is not None:
        return args.code
    path = Path(args.file)
    if not path.exists():
        print(f"Error: Script file not found: {path}", file=sys.stderr)
        return None
    return path.read_text(encoding="utf-8")


def cmd_serve(args):
    """Start the MCP server."""
    if args.app:
        osa.APP_NAME = args.app
    print(f"Starting Illustrator Exec MCP Server (app: {osa.APP_NAME}) ...", file=sys.stderr)

    import illustrator_server
    illustrator_server.main()
    return 0


def cmd_run(args):
    """Execute a script body and print the formatted response text."""
    code = _read_code(args)
    if code is None:
        return 1
    response = osa.format_result(osa.run_jsx(code, timeout=args.timeout, app_name=args.app))
    for block in response.content:
        print(block.text)
    return 1 if response.isError else 0


def cmd_wrap(args):
    """Print the wrapped JSX or the full osascript command."""
    code = _read_code(args)
    if code is None:
        return 1
    if args.command_line:
        print(osa.build_osascript_command(wrap_script(code), args.app))
    else:
        print(wrap_script(code))
    return 0


def cmd_check(args):
    """Evaluate app.name to confirm the bridge works."""
    result = osa.eval_expr("app.name + ' ' + app.version", timeout=args.timeout, app_name=args.app)
    response = osa.format_result(result)
    text = response.content[0].text
    if response.isError:
        print(f"Illustrator not reachable: {text}")
        return 1
    print(f"Connected: {text}")
    return 0


def _add_code_source(parser):
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="Path to a JSX script body")
    source.add_argument("--code", help="Script body given inline")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Illustrator Exec MCP – Management Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", help="Logging level (default: $ILLUSTRATOR_LOG_LEVEL or WARNING)")
    parser.add_argument("--app", help=f"Target application (default: {osa.APP_NAME})")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # serve
    subparsers.add_parser("serve", help="Start MCP server")

    # run
    p_run = subparsers.add_parser("run", help="Execute a script body in Illustrator")
    _add_code_source(p_run)
    p_run.add_argument("--timeout", type=float, help=f"Seconds (default: {osa.DEFAULT_TIMEOUT:g})")

    # wrap
    p_wrap = subparsers.add_parser("wrap", help="Print the wrapped script without running it")
    _add_code_source(p_wrap)
    p_wrap.add_argument(
        "--command",
        dest="command_line",
        action="store_true",
        help="Print the full osascript command line instead of the JSX",
    )

    # check
    p_check = subparsers.add_parser("check", help="Check that Illustrator is reachable")
    p_check.add_argument("--timeout", type=float, help=f"Seconds (default: {osa.EVAL_TIMEOUT:g})")

    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "serve": cmd_serve,
        "run": cmd_run,
        "wrap": cmd_wrap,
        "check": cmd_check,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main() or 0)
