"""Model response normalization.

Two independent transforms over the raw model text:

* reasoning stripping removes ``<think>``/``<thinking>`` spans; an unclosed
  span runs to the end of the text.
* fence stripping removes ```` ```sql ```` and ```` ``` ```` delimiters.

The executable SQL always has reasoning removed. The display content keeps it
unless the caller turns ``show_thinking`` off. When a strip leaves nothing,
the pre-strip text is used instead.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

_REASONING_RE = re.compile(r"<think(?:ing)?[\s\S]*?(?:</think(?:ing)?>|\Z)", re.IGNORECASE)
_FENCE_RE = re.compile(r"```(?:sql)?", re.IGNORECASE)


@dataclass(frozen=True)
class NormalizedResponse:
    display_content: str
    executable_sql: str


def strip_reasoning(text: str | None) -> str | None:
    """Remove reasoning spans and trim. ``None`` or empty input gives ``None``."""
    if not text:
        return None
    return _REASONING_RE.sub("", text).strip()


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def _strip_reasoning_or_keep(text: str) -> str:
    stripped = strip_reasoning(text)
    return stripped if stripped else text


def _strip_fences_or_keep(text: str) -> str:
    stripped = strip_code_fences(text)
    return stripped if stripped else text


def extract_sql(raw: str) -> str:
    return _strip_fences_or_keep(_strip_reasoning_or_keep(raw))


def normalize_response(raw: str | None, *, show_thinking: bool) -> NormalizedResponse:
    raw = (raw or "").strip()
    display = _strip_fences_or_keep(raw)
    if not show_thinking:
        display = _strip_reasoning_or_keep(display)
    return NormalizedResponse(display_content=display, executable_sql=extract_sql(raw))
