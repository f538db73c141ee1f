"""Pure text helpers for provider output and language sniffing."""

from __future__ import annotations

import re

_THINK_BLOCK_RE = re.compile(r"<think>.*?</think>", re.IGNORECASE | re.DOTALL)
_THINK_OPEN = "<think>"

_CZECH_CHARS = set("ěščřžýáíéůúťďňĚŠČŘŽÝÁÍÉŮÚŤĎŇ")
_CZECH_ONLY_CHARS = set("ěřůĚŘŮ")
_GERMAN_CHARS = set("äöüßÄÖÜ")
_GERMAN_WORDS = {"der", "die", "das", "und", "nicht", "mit", "für", "ist", "bei", "wird"}


def strip_thinking(content: str) -> str:
    """Remove ``<think>...</think>`` blocks from a model response.

    Returns an empty string when an opening tag is never closed, which
    means the response was cut off while the model was still thinking.
    """
    if not content:
        return ""
    result = _THINK_BLOCK_RE.sub("", content)
    if result.lstrip().lower().startswith(_THINK_OPEN):
        return ""
    return result.strip()


def looks_like_czech(text: str) -> bool:
    """Heuristic: Czech-specific letters, or several Czech diacritics."""
    if not text:
        return False
    if any(ch in _CZECH_ONLY_CHARS for ch in text):
        return True
    return sum(1 for ch in text if ch in _CZECH_CHARS) >= 2


def looks_like_german(text: str) -> bool:
    if not text:
        return False
    if any(ch in _GERMAN_CHARS for ch in text):
        return True
    words = {w.lower() for w in re.findall(r"\w+", text)}
    return len(words & _GERMAN_WORDS) >= 2


def looks_like(text: str, language_tag: str) -> bool:
    if language_tag == "cs":
        return looks_like_czech(text)
    if language_tag == "de":
        return looks_like_german(text)
    return False
