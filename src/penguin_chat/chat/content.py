"""Split assistant message text into prose and fenced code segments.

A fenced block runs from a triple-backtick opener to the next triple-backtick
closer. The text on the opener line is the language tag; the code starts on the
following line. A trailing opener without a closer is left as prose, backticks
included.
"""

import re
from dataclasses import dataclass

FENCE = "```"

_FENCED_BLOCK = re.compile(r"(```[\s\S]*?```)")


@dataclass(frozen=True)
class Prose:
    text: str


@dataclass(frozen=True)
class Code:
    text: str
    language: str | None = None


Segment = Prose | Code


def parse(raw: str) -> list[Segment]:
    """Return the ordered segments of ``raw``. Never raises."""
    segments: list[Segment] = []
    # re.split with a capturing group puts fenced blocks at odd indices
    for i, part in enumerate(_FENCED_BLOCK.split(raw)):
        if i % 2:
            segments.append(_code_segment(part[len(FENCE) : -len(FENCE)]))
        elif part:
            segments.append(Prose(part))
    return segments


def _code_segment(inner: str) -> Code:
    header, newline, body = inner.partition("\n")
    if not newline:
        # ```inline``` has no language line
        return Code(text=inner)
    if body.endswith("\r\n"):
        body = body[:-2]
    elif body.endswith("\n"):
        body = body[:-1]
    return Code(text=body, language=header.strip() or None)
