import re
from typing import Iterable, List, Sequence

_WORD = re.compile(r"\b\w+\b")


def tokenize(text: str) -> List[str]:
    return _WORD.findall((text or "").lower())


def is_narrow_topic(need: str, focus_vocabulary: Iterable[str]) -> bool:
    """True when the need shares no word with the focus vocabulary."""
    vocab = {w.lower() for w in focus_vocabulary}
    return not any(tok in vocab for tok in tokenize(need))


def extract_keywords(
    need: str,
    *,
    limit: int,
    default: Sequence[str],
    policy: str = "tokens",
    focus_vocabulary: Iterable[str] = (),
) -> List[str]:
    """
    First `limit` distinct lower-cased word tokens of the need.

    policy="focus" swaps in the default set when the need is off-topic
    for the focus vocabulary; either policy falls back to the default set
    when no tokens are found.
    """
    if policy == "focus" and is_narrow_topic(need, focus_vocabulary):
        return list(default)

    out: List[str] = []
    for tok in tokenize(need):
        if tok not in out:
            out.append(tok)
        if len(out) >= limit:
            break
    return out or list(default)
