from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from brace_templater.errors import MissingClosingBrace


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Placeholder:
    body: str
    position: int


Segment = Union[Literal, Placeholder]


def scan(template: str) -> list[Segment]:
    """Split *template* into literal runs and placeholder bodies.

    ``{{`` is an escape for a literal ``{``. There is no ``}}`` escape: a
    ``}`` outside a placeholder is ordinary text.
    """
    segments: list[Segment] = []
    literal: list[str] = []
    i = 0
    n = len(template)

    while i < n:
        char = template[i]
        if char != "{":
            literal.append(char)
            i += 1
            continue

        if template.startswith("{{", i):
            literal.append("{")
            i += 2
            continue

        end = template.find("}", i + 1)
        if end == -1:
            raise MissingClosingBrace(i)

        if literal:
            segments.append(Literal("".join(literal)))
            literal = []
        segments.append(Placeholder(body=template[i + 1 : end].strip(), position=i))
        i = end + 1

    if literal:
        segments.append(Literal("".join(literal)))
    return segments
