import pytest

from brace_templater.errors import EmptyExpression, InvalidExpressionSyntax
from brace_templater.parser import ForEachEnd, ForEachStart, VariableAccess, parse_expression


def test_parse_variable_access() -> None:
    assert parse_expression("visitors") == VariableAccess(name="visitors")


def test_parse_keeps_dotted_word_whole() -> None:
    assert parse_expression("_.url") == VariableAccess(name="_.url")
    assert parse_expression("a.") == VariableAccess(name="a.")
    assert parse_expression(".a") == VariableAccess(name=".a")


def test_parse_splits_words_on_ascii_whitespace_only() -> None:
    assert parse_expression("a\xa0b") == VariableAccess(name="a\xa0b")
    assert parse_expression("foreach　xs") == VariableAccess(name="foreach　xs")


def test_parse_foreach_and_endfor() -> None:
    assert parse_expression("foreach nums") == ForEachStart(collection="nums")
    assert parse_expression("foreach\tsite.links") == ForEachStart(collection="site.links")
    assert parse_expression("endfor") == ForEachEnd()


def test_parse_empty_body_fails() -> None:
    with pytest.raises(EmptyExpression) as exc_info:
        parse_expression("", position=4)
    assert exc_info.value.position == 4


@pytest.mark.parametrize(
    "body",
    [
        "a b",
        "foreach",
        "foreach a b",
        "endfor now",
        "a\f b",
    ],
)
def test_parse_rejects_malformed_bodies(body: str) -> None:
    with pytest.raises(InvalidExpressionSyntax) as exc_info:
        parse_expression(body, position=2)

    assert exc_info.value.expression == body
    assert exc_info.value.position == 2
