from __future__ import annotations

import logging
from collections import ChainMap
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Union

from brace_templater.errors import (
    LoopVariableNotFound,
    ReservedKeyword,
    TemplateError,
    UnmatchedEndFor,
    UnmatchedForEach,
    UnsupportedValueShape,
    VariableNotFound,
)
from brace_templater.parser import (
    KEYWORDS,
    LOOP_VARIABLE,
    Expression,
    ForEachEnd,
    ForEachStart,
    VariableAccess,
    parse_expression,
)
from brace_templater.scanner import Literal, scan
from brace_templater.values import (
    ListValue,
    ObjectValue,
    StringValue,
    Value,
    build_environment,
    shape_name,
    to_text,
)

logger = logging.getLogger(__name__)

Scope = ChainMap  # ChainMap[str, Value]


@dataclass(frozen=True)
class ParsedPlaceholder:
    expression: Expression
    position: int


Node = Union[Literal, ParsedPlaceholder]


def validate_environment(variables: Mapping[str, object]) -> None:
    for name in variables:
        if name in KEYWORDS:
            raise ReservedKeyword(name)


def parse_template(template: str) -> list[Node]:
    nodes: list[Node] = []
    for segment in scan(template):
        if isinstance(segment, Literal):
            nodes.append(segment)
        else:
            expression = parse_expression(segment.body, segment.position)
            nodes.append(ParsedPlaceholder(expression=expression, position=segment.position))
    return nodes


def match_blocks(nodes: list[Node]) -> dict[int, int]:
    """Pair every ``foreach`` node index with the index of its ``endfor``."""
    open_blocks: list[tuple[int, int]] = []
    block_ends: dict[int, int] = {}
    for index, node in enumerate(nodes):
        if not isinstance(node, ParsedPlaceholder):
            continue
        if isinstance(node.expression, ForEachStart):
            open_blocks.append((index, node.position))
        elif isinstance(node.expression, ForEachEnd):
            if not open_blocks:
                raise UnmatchedEndFor(node.position)
            start, _position = open_blocks.pop()
            block_ends[start] = index
    if open_blocks:
        _index, position = open_blocks[-1]
        raise UnmatchedForEach(position)
    return block_ends


class CompiledTemplate:
    """A template parsed into a flat node list with its loop blocks matched."""

    def __init__(self, nodes: list[Node], block_ends: dict[int, int]):
        self.nodes = nodes
        self.block_ends = block_ends

    @classmethod
    def from_text(cls, template: str) -> CompiledTemplate:
        nodes = parse_template(template)
        return cls(nodes, match_blocks(nodes))

    def render(self, variables: Mapping[str, object]) -> str:
        validate_environment(variables)
        return self.render_environment(build_environment(variables))

    def render_environment(self, environment: Mapping[str, Value]) -> str:
        out: list[str] = []
        self._render_range(0, len(self.nodes), ChainMap(dict(environment)), out)
        return "".join(out)

    def _render_range(self, start: int, stop: int, scope: Scope, out: list[str]) -> None:
        index = start
        while index < stop:
            node = self.nodes[index]
            if isinstance(node, Literal):
                out.append(node.text)
            elif isinstance(node.expression, VariableAccess):
                access = node.expression
                value = _resolve(
                    access.name,
                    scope,
                    not_found=lambda name: VariableNotFound(name, node.position),
                )
                out.append(to_text(value, name=access.name))
            elif isinstance(node.expression, ForEachStart):
                end = self.block_ends[index]
                collection = node.expression.collection
                value = _resolve(
                    collection,
                    scope,
                    not_found=lambda name: LoopVariableNotFound(name, node.position),
                )
                for element in _iterate(value, name=collection):
                    self._render_range(index + 1, end, scope.new_child({LOOP_VARIABLE: element}), out)
                index = end
            elif isinstance(node.expression, ForEachEnd):
                # consumed by the matching ForEachStart
                pass
            else:
                raise TypeError(f"unknown template node: {node!r}")
            index += 1


def render(template: str, variables: Mapping[str, object]) -> str:
    """Render *template* with *variables*.

    The environment is checked for reserved names before the template is
    scanned. Any failure raises a :class:`TemplateError` subclass and no
    partial output is returned.
    """
    validate_environment(variables)
    environment = build_environment(variables)
    compiled = CompiledTemplate.from_text(template)
    rendered = compiled.render_environment(environment)
    logger.debug("rendered template: %d nodes, %d -> %d chars", len(compiled.nodes), len(template), len(rendered))
    return rendered


def _resolve(
    word: str,
    scope: Scope,
    *,
    not_found: Callable[[str], TemplateError],
) -> Value:
    """Look *word* up by its exact name, then as a dotted member path.

    A name bound in scope always wins, so ``{ a.b }`` reads a variable called
    ``a.b`` before it tries field ``b`` of ``a``.
    """
    if word in scope:
        return scope[word]

    path = word.split(".")
    if len(path) == 1 or not all(path) or path[0] not in scope:
        raise not_found(word)
    value = scope[path[0]]
    for depth in range(1, len(path)):
        if not isinstance(value, ObjectValue):
            raise UnsupportedValueShape(".".join(path[:depth]), shape_name(value))
        field = path[depth]
        if field not in value.fields:
            raise not_found(".".join(path[: depth + 1]))
        value = value.fields[field]
    return value


def _iterate(value: Value, *, name: str) -> Iterable[Value]:
    if isinstance(value, ListValue):
        return value.items
    if isinstance(value, ObjectValue):
        return [
            ObjectValue({"key": StringValue(key), "value": item})
            for key, item in sorted(value.fields.items())
        ]
    raise UnsupportedValueShape(name, shape_name(value))
