# response_parser.py
import json
import re
from typing import Any, NamedTuple

from errors import ParseError

FENCE = "```"
JSON_FENCE_RE = re.compile(r"```json(?![A-Za-z0-9])[ \t]*\r?\n?", re.IGNORECASE)
# a bare language tag such as "javascript" on the opening fence line
LANG_TAG_RE = re.compile(r"^(?!(?:true|false|null)\s)[A-Za-z][A-Za-z0-9_+.-]*[ \t]*\r?\n")


class Unwrapped(NamedTuple):
    fenced: bool
    payload: str


def unwrap_fences(text):
    """Pull the JSON payload out of a model reply that may be markdown-fenced.

    The first ```json block wins, wherever it sits. Failing that the first
    generic ``` block is used, and failing that the whole string.
    """
    text = text or ""

    m = JSON_FENCE_RE.search(text)
    if m:
        rest = text[m.end():]
        end = rest.find(FENCE)
        body = rest if end == -1 else rest[:end]
        return Unwrapped(True, body.strip())

    start = text.find(FENCE)
    if start != -1:
        rest = text[start + len(FENCE):]
        end = rest.find(FENCE)
        body = rest if end == -1 else rest[:end]
        body = LANG_TAG_RE.sub("", body, count=1)
        return Unwrapped(True, body.strip())

    return Unwrapped(False, text.strip())


def parse_model_json(text) -> Any:
    unwrapped = unwrap_fences(text)
    if not unwrapped.payload:
        raise ParseError("model reply contained no JSON", raw_text=text or "")
    try:
        return json.loads(unwrapped.payload)
    except json.JSONDecodeError as exc:
        raise ParseError(f"model reply is not valid JSON: {exc.msg} (line {exc.lineno})",
                         raw_text=text) from exc
