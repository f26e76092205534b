"""Shared fixtures: osascript stand-ins and a reference AppleScript lexer."""

import os
import re
import shlex

import pytest

import illustrator_osa as osa

# ---------------------------------------------------------------------------
# Reference lexer for AppleScript string literals
# ---------------------------------------------------------------------------

_UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}

_DIRECTIVE = re.compile(
    r'tell application "((?:[^"\\]|\\.)*)" to do javascript "((?:[^"\\]|\\.)*)"',
    re.DOTALL,
)


def lex_applescript_string(body: str) -> str:
    """Decode the inside of an AppleScript "..." literal the way osascript does."""
    out = []
    chars = iter(body)
    for ch in chars:
        if ch == "\\":
            out.append(_UNESCAPES[next(chars)])
        elif ch == '"':
            raise ValueError("unescaped quote would end the literal")
        else:
            out.append(ch)
    return "".join(out)


def parse_directive(directive: str) -> tuple[str, str]:
    """Return (application, javascript) from a do-javascript directive."""
    m = _DIRECTIVE.fullmatch(directive)
    assert m, f"not a do-javascript directive: {directive[:80]!r}"
    return lex_applescript_string(m.group(1)), lex_applescript_string(m.group(2))


@pytest.fixture
def directive_parser():
    return parse_directive


# ---------------------------------------------------------------------------
# Configuration isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    monkeypatch.setattr(osa, "OSASCRIPT", "osascript")
    monkeypatch.setattr(osa, "APP_NAME", "Adobe Illustrator")
    monkeypatch.setattr(osa, "DEFAULT_TIMEOUT", 60.0)
    monkeypatch.setattr(osa, "EVAL_TIMEOUT", 30.0)


# ---------------------------------------------------------------------------
# Fake osascript executables
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_osascript(tmp_path, monkeypatch):
    """Install a /bin/sh script named ``osascript`` as the bridge executable.

    Call with the shell body; returns the script path.
    """
    def install(shell_body: str):
        path = tmp_path / "osascript"
        path.write_text("#!/bin/sh\n" + shell_body + "\n", encoding="utf-8")
        os.chmod(path, 0o755)
        monkeypatch.setattr(osa, "OSASCRIPT", str(path))
        return path

    return install


@pytest.fixture
def echo_osascript(tmp_path, fake_osascript):
    """Fake osascript that records its -e argument and prints canned output.

    Returns a function taking the stdout text; it gives back the path of the
    file the directive is recorded in.
    """
    def install(stdout: str):
        out_file = tmp_path / "stdout.txt"
        record = tmp_path / "directive.txt"
        out_file.write_text(stdout, encoding="utf-8")
        fake_osascript(
            f'printf "%s" "$2" > {shlex.quote(str(record))}\n'
            f"cat {shlex.quote(str(out_file))}"
        )
        return record

    return install


@pytest.fixture
def applescript_lexer():
    return lex_applescript_string
