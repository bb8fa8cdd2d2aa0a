from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from brace_templater.errors import EmptyExpression, InvalidExpressionSyntax

FOREACH_KEYWORD = "foreach"
ENDFOR_KEYWORD = "endfor"
KEYWORDS = (FOREACH_KEYWORD, ENDFOR_KEYWORD)
LOOP_VARIABLE = "_"

# words are separated by ASCII whitespace only, other spaces belong to the name
WORD_SEPARATOR_RE = re.compile(r"[ \t\n\r\f\v]+")


@dataclass(frozen=True)
class VariableAccess:
    name: str


@dataclass(frozen=True)
class ForEachStart:
    collection: str


@dataclass(frozen=True)
class ForEachEnd:
    pass


Expression = Union[VariableAccess, ForEachStart, ForEachEnd]


def parse_expression(body: str, position: int = 0) -> Expression:
    """Classify a trimmed placeholder body.

    ``foreach xs`` and ``endfor`` are the loop markers, anything else must be a
    single word naming a variable. Whether a dotted word is a member path is
    decided when it is resolved, not here.
    """
    words = [word for word in WORD_SEPARATOR_RE.split(body) if word]
    if not words:
        raise EmptyExpression(position)

    keyword = words[0]
    if keyword == FOREACH_KEYWORD:
        if len(words) != 2:
            raise InvalidExpressionSyntax(body, position)
        return ForEachStart(collection=words[1])

    if keyword == ENDFOR_KEYWORD:
        if len(words) != 1:
            raise InvalidExpressionSyntax(body, position)
        return ForEachEnd()

    if len(words) != 1:
        raise InvalidExpressionSyntax(body, position)
    return VariableAccess(name=keyword)
