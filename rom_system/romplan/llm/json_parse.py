"""
Locates and parses JSON inside free model text.

Models wrap JSON in prose or ```json fences, so extraction is two-stage:
find a balanced candidate with a bracket scanner (string literals and
escapes are tracked, so braces inside strings don't count), then parse it.
Candidates are tried in order of their opening position until one parses.
"""


import json
from typing import Any, Dict, Iterator, Optional, Set, Tuple

from romplan.core.errors import MalformedJson, NoJsonFound

_OPENERS = {"object": "{", "array": "["}
_PAIRS = {"{": "}", "[": "]"}
_CLOSERS = {"}", "]"}


def _scan(text: str, start: int, known: Dict[int, int], dead: Set[int]) -> Optional[int]:
    """
    Scan the value opening at `start` and return its end (exclusive).
    A value that runs off the end of the text ends at len(text); one broken
    by a mismatched closer returns None.

    Every nested value that closes is recorded in `known`. Openers still
    open when the scan fails go to `dead`: a scan from any of them sees the
    same characters in the same string state and fails the same way.
    """
    stack = []  # (expected closer, opening index)
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _PAIRS:
            stack.append((_PAIRS[ch], i))
        elif ch in _CLOSERS:
            if stack[-1][0] != ch:
                dead.update(opened for _, opened in stack)
                return None
            _, opened = stack.pop()
            known[opened] = i + 1
            if not stack:
                return i + 1
    dead.update(opened for _, opened in stack)
    return len(text)


def _candidates(text: str, opener: str) -> Iterator[Tuple[int, int]]:
    """
    Yield (start, end) spans of balanced values that begin with `opener`,
    ordered by start. A value that runs off the end of the text is yielded
    as a span to the end; one broken by a mismatched closer is skipped.
    """
    known: Dict[int, int] = {}
    dead: Set[int] = set()
    pos = text.find(opener)
    while pos != -1:
        if pos not in dead:
            end = known.get(pos)
            if end is None:
                end = _scan(text, pos, known, dead)
            if end is not None:
                yield pos, end
        pos = text.find(opener, pos + 1)


def extract_json(text: str, mode: str = "object") -> Any:
    """
    Return the first well-formed JSON object (mode="object") or array
    (mode="array") found in `text`.

    Raises NoJsonFound when no candidate exists, MalformedJson when
    candidates exist but none of them parse.
    """
    if mode not in _OPENERS:
        raise ValueError(f"Unknown extraction mode: {mode}")

    text = text or ""
    first_err: Exception | None = None
    for start, end in _candidates(text, _OPENERS[mode]):
        try:
            return json.loads(text[start:end])
        except (json.JSONDecodeError, RecursionError) as e:
            if first_err is None:
                first_err = e

    if first_err is None:
        raise NoJsonFound(f"No JSON {mode} found in text")
    raise MalformedJson(f"JSON {mode} candidate failed to parse: {first_err}")
