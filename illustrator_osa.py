"""
Illustrator OSA Automation Layer.

Runs JSX in Adobe Illustrator through macOS Open Scripting Architecture:
- Automatic try/catch wrapping with a structured success/error envelope
- ES3-safe JSON serialisation inside Illustrator (see jsx_codec)
- Two independent escaping layers for transport
- Synchronous osascript invocation with a wall-clock timeout
- Two-level result classification into MCP tool responses

Transport::

    osascript -e 'tell application "Adobe Illustrator" to do javascript "<jsx>"'

The JSX is escaped for the AppleScript double-quoted literal first, then the
whole directive is quoted as a single-quoted shell word. The composed command
is split with POSIX shell rules and run without a shell, so operator
metacharacters in script content are never interpreted.

Result shapes:
- process failure:    ``{success: False, error: str}``
- process success:    ``{success: True, result: <decoded output>}`` where the
  decoded output is normally the wrapper envelope
  ``{success: bool, data: ..., error: str}``
"""

import json
import logging
import os
import shlex
import subprocess
import time

from mcp import types

from jsx_codec import ERROR_TAG, VALUE_TAG, parse_result, wrap_expression, wrap_script

log = logging.getLogger("illustrator_osa")

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

APP_NAME = os.environ.get("ILLUSTRATOR_APP", "Adobe Illustrator")
OSASCRIPT = os.environ.get("ILLUSTRATOR_OSASCRIPT", "osascript")

DEFAULT_TIMEOUT = float(os.environ.get("ILLUSTRATOR_EXEC_TIMEOUT", "60"))
EVAL_TIMEOUT = float(os.environ.get("ILLUSTRATOR_EVAL_TIMEOUT", "30"))


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------

# Backslash must come first so later replacements are not re-escaped.
_APPLESCRIPT_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)


def escape_applescript_string(text: str) -> str:
    """Escape text for the inside of an AppleScript ``"..."`` literal."""
    for char, replacement in _APPLESCRIPT_ESCAPES:
        text = text.replace(char, replacement)
    return text


def quote_shell_argument(text: str) -> str:
    """Quote text as one single-quoted POSIX shell word.

    Each embedded ``'`` becomes ``'\\''``: close quoting, escaped quote,
    reopen quoting.
    """
    return "'" + text.replace("'", "'\\''") + "'"


def build_directive(script: str, app_name: str | None = None) -> str:
    """AppleScript directive that hands ``script`` to Illustrator."""
    app = escape_applescript_string(app_name or APP_NAME)
    return f'tell application "{app}" to do javascript "{escape_applescript_string(script)}"'


def build_osascript_command(script: str, app_name: str | None = None) -> str:
    """Full ``osascript -e '...'`` command line for a JSX program."""
    return f"{shlex.quote(OSASCRIPT)} -e {quote_shell_argument(build_directive(script, app_name))}"


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

def execute(command: str, timeout: float | None = None) -> dict:
    """Run an osascript command line and capture its output.

    Blocks until the process exits or ``timeout`` seconds pass; on timeout
    the process is killed. Never raises for process problems.

    Returns:
        ``{success: True, output: str}`` with stdout trimmed, or
        ``{success: False, error: str}`` with the best diagnostic available.
    """
    if timeout is None:
        timeout = DEFAULT_TIMEOUT
    argv = shlex.split(command)
    program = os.path.basename(argv[0]) if argv else "osascript"

    t0 = time.monotonic()
    try:
        proc = subprocess.run(
            argv,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        log.warning("%s timed out after %gs", program, timeout)
        return {"success": False, "error": f"{program} timed out after {timeout:g}s"}
    except OSError as e:
        log.warning("Could not launch %s: %s", program, e)
        return {"success": False, "error": str(e)}

    elapsed = time.monotonic() - t0
    log.debug("%s finished in %.2fs (exit %d)", program, elapsed, proc.returncode)
    if elapsed > timeout / 2:
        log.warning("%s took %.1fs (timeout: %gs)", program, elapsed, timeout)

    stderr = (proc.stderr or "").strip()
    if proc.returncode != 0:
        log.warning("%s exited with status %d: %s", program, proc.returncode, stderr)
        return {
            "success": False,
            "error": stderr or f"{program} exited with status {proc.returncode}",
        }
    if stderr:
        log.warning("%s wrote to stderr: %s", program, stderr)
    return {"success": True, "output": (proc.stdout or "").strip()}


def run_jsx(code: str, timeout: float | None = None, app_name: str | None = None) -> dict:
    """Execute a JSX script body in Illustrator with the safety wrapper.

    Args:
        code: Script body. Use ``return`` to hand back data.
        timeout: Seconds before the osascript process is killed
                 (default: ``DEFAULT_TIMEOUT``).
        app_name: Target application (default: ``APP_NAME``).

    Returns:
        The process-level error dict, or ``{success: True, result: ...}``
        where ``result`` is the decoded envelope (or raw text).
    """
    command = build_osascript_command(wrap_script(code), app_name)
    outcome = execute(command, timeout)
    if not outcome["success"]:
        return outcome
    return parse_result(outcome["output"])


def eval_expr(
    expression: str,
    timeout: float | None = None,
    app_name: str | None = None,
) -> dict:
    """Evaluate a simple expression in Illustrator.

    No wrapper and no serialiser: the value comes back as a string.
    For quick read-only queries (e.g. ``app.documents.length``).
    The result uses the same shape as :func:`run_jsx`, with an envelope
    whose ``data`` is the string value. Untagged output is kept as data.
    """
    if timeout is None:
        timeout = EVAL_TIMEOUT
    command = build_osascript_command(wrap_expression(expression), app_name)
    outcome = execute(command, timeout)
    if not outcome["success"]:
        return outcome
    text = outcome["output"]
    if text.startswith(ERROR_TAG):
        return {"success": True, "result": {"success": False, "error": text[len(ERROR_TAG):]}}
    if text.startswith(VALUE_TAG):
        text = text[len(VALUE_TAG):]
    return {"success": True, "result": {"success": True, "data": text}}


# ---------------------------------------------------------------------------
# Response formatting
# ---------------------------------------------------------------------------

def _fmt(obj) -> str:
    """Format result as indented JSON string."""
    return json.dumps(obj, indent=2, ensure_ascii=False)


def _text_result(text: str, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


def _envelope_error(envelope) -> str:
    """Message for an application-level failure or an unrecognised payload."""
    if isinstance(envelope, dict):
        error = envelope.get("error")
        return str(error) if error is not None else "unknown error"
    if isinstance(envelope, str):
        return envelope or "empty response"
    return _fmt(envelope)


def format_result(result: dict) -> types.CallToolResult:
    """Collapse a bridge result into a single-text MCP tool response.

    The process layer is checked first and its failure is reported without
    looking at any application payload. Only then is the envelope checked.
    """
    if not result.get("success"):
        return _text_result(f"Error: {result.get('error')}", is_error=True)

    envelope = result.get("result")
    if not isinstance(envelope, dict) or not envelope.get("success"):
        return _text_result(f"Illustrator error: {_envelope_error(envelope)}", is_error=True)

    return _text_result(_fmt(envelope.get("data")))
