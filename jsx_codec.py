"""
ExtendScript JSON Codec.

Builds the JSX that runs inside Illustrator and decodes what comes back:
- ES3 JSON serialiser (``__jsonStringify__``), since ExtendScript has no JSON object
- Script wrapper producing a fixed success/error envelope
- Expression template for lightweight read-only queries
- Python-side literal encoder for embedding caller values into generated JSX
- Tolerant decoder for raw osascript output (JSON first, plain text fallback)

Envelope shapes produced by the wrapper::

    {"success":true,"data":<serialised return value>}
    {"success":false,"error":"<message>"}
"""

import json
import logging
import math
import re

log = logging.getLogger("jsx_codec")

# ---------------------------------------------------------------------------
# JSX Polyfill
# ---------------------------------------------------------------------------

# ES3 only: conditionals, loops, property enumeration and String.replace.
# Escape order in __jsonQuote__: backslash, quote, LF, CR, tab, then any
# remaining control character as \u00XX.
JSON_POLYFILL = r"""
function __jsonQuote__(s) {
  return '"' + String(s)
    .replace(/\\/g, '\\\\')
    .replace(/"/g, '\\"')
    .replace(/\n/g, '\\n')
    .replace(/\r/g, '\\r')
    .replace(/\t/g, '\\t')
    .replace(/[\x00-\x1f]/g, function(c) {
      var hex = c.charCodeAt(0).toString(16);
      return '\\u' + (hex.length < 2 ? '000' : '00') + hex;
    }) + '"';
}
function __jsonStringify__(obj) {
  if (obj === null) return 'null';
  if (obj === undefined) return 'null';
  if (typeof obj === 'boolean') return obj ? 'true' : 'false';
  if (typeof obj === 'number') return isFinite(obj) ? String(obj) : 'null';
  if (typeof obj === 'string') return __jsonQuote__(obj);
  if (obj instanceof Array) {
    var arr = [];
    for (var i = 0; i < obj.length; i++) {
      arr.push(__jsonStringify__(obj[i]));
    }
    return '[' + arr.join(',') + ']';
  }
  if (typeof obj === 'object') {
    var parts = [];
    for (var k in obj) {
      if (obj.hasOwnProperty(k)) {
        parts.push(__jsonQuote__(k) + ':' + __jsonStringify__(obj[k]));
      }
    }
    return '{' + parts.join(',') + '}';
  }
  return 'null';
}
"""


# ---------------------------------------------------------------------------
# JSX Wrapper
# ---------------------------------------------------------------------------

_WRAPPER_HEAD = """\
(function() {
  var __uilevel__ = null;
  try {
    __uilevel__ = app.userInteractionLevel;
    app.userInteractionLevel = UserInteractionLevel.DONTDISPLAYALERTS;
  } catch (x) {}
  try {
    var __result__ = (function() {
"""

_WRAPPER_TAIL = r"""
    })();
    try { if (__uilevel__ !== null) app.userInteractionLevel = __uilevel__; } catch (x) {}
    return '{"success":true,"data":' + __jsonStringify__(__result__) + '}';
  } catch (e) {
    try { if (__uilevel__ !== null) app.userInteractionLevel = __uilevel__; } catch (x) {}
    var __message__ = String((e && e.message) || e).replace(/\r\n|\r|\n/g, ' ');
    return '{"success":false,"error":' + __jsonQuote__(__message__) + '}';
  }
})();
"""


def wrap_script(body: str) -> str:
    """Build the full JSX program around a script body.

    The body runs inside its own function, so it hands data back with a
    plain ``return`` statement::

        var doc = app.activeDocument;
        return {name: doc.name, layers: doc.layers.length};

    Anything thrown by the body is caught and re-expressed as the
    ``success:false`` envelope; alert dialogs are suppressed for the
    duration of the call. The IIFE is the last expression, so its string
    value is what ``do javascript`` hands back to AppleScript.
    """
    return JSON_POLYFILL + _WRAPPER_HEAD + body + _WRAPPER_TAIL


# Expression evaluator: no envelope, one tagged line of text.
VALUE_TAG = "__value__:"
ERROR_TAG = "__error__:"

_JSX_EVAL_TEMPLATE = """\
(function() {
  var __uilevel__ = null;
  try {
    __uilevel__ = app.userInteractionLevel;
    app.userInteractionLevel = UserInteractionLevel.DONTDISPLAYALERTS;
  } catch (x) {}
  var __out__;
  try {
    var __r__ = $EXPRESSION$;
    __out__ = '__value__:' + (__r__ === undefined ? 'undefined' : __r__ === null ? 'null' : String(__r__));
  } catch (e) {
    __out__ = '__error__:' + ((e && e.message) || String(e));
  }
  try { if (__uilevel__ !== null) app.userInteractionLevel = __uilevel__; } catch (x) {}
  return __out__;
})();
"""


def wrap_expression(expression: str) -> str:
    """Build the JSX for a single read-only expression.

    The answer is ``String(value)`` (``'undefined'`` and ``'null'`` for the
    empty values) behind ``VALUE_TAG``, or the thrown message behind
    ``ERROR_TAG``. Every answer is tagged, so a value can never be mistaken
    for an error. Alert dialogs are suppressed as in :func:`wrap_script`.
    """
    return _JSX_EVAL_TEMPLATE.replace("$EXPRESSION$", expression)


# ---------------------------------------------------------------------------
# Python -> JSX literals
# ---------------------------------------------------------------------------

_STRING_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
    # ES3 treats these as line terminators inside string literals
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f]")


def quote_string(text: str) -> str:
    """Return ``text`` as a double-quoted JS/JSON string literal."""
    for char, replacement in _STRING_ESCAPES:
        text = text.replace(char, replacement)
    text = _CONTROL_CHARS.sub(lambda m: f"\\u{ord(m.group()):04x}", text)
    return '"' + text + '"'


def to_jsx_literal(value) -> str:
    """Serialise a JSON-like Python value into JSX source text.

    Same rules as ``__jsonStringify__``: ``None`` -> ``null``, booleans ->
    ``true``/``false``, non-finite floats -> ``null``. The output is valid
    JSON as well as valid ExtendScript. Unsupported types raise TypeError.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value) if math.isfinite(value) else "null"
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(to_jsx_literal(v) for v in value) + "]"
    if isinstance(value, dict):
        pairs = (f"{quote_string(str(k))}:{to_jsx_literal(v)}" for k, v in value.items())
        return "{" + ",".join(pairs) + "}"
    raise TypeError(f"Cannot embed {type(value).__name__} in JSX")


# ---------------------------------------------------------------------------
# Result decoding
# ---------------------------------------------------------------------------

def parse_result(raw: str | None) -> dict:
    """Decode raw process output into ``{success: True, result: ...}``.

    Valid JSON becomes the structured result (normally the wrapper's
    envelope). Anything else is kept as the trimmed text, since Illustrator
    sometimes answers with a plain diagnostic instead of an envelope.
    """
    if raw is None:
        return {"success": True, "result": None}
    text = raw.strip()
    try:
        return {"success": True, "result": json.loads(text)}
    except (json.JSONDecodeError, ValueError):
        log.debug("Non-JSON output from Illustrator, keeping raw text (%d chars)", len(text))
        return {"success": True, "result": text}
