import pytest

from brace_templater.errors import (
    LoopVariableNotFound,
    UnmatchedEndFor,
    UnmatchedForEach,
    UnsupportedValueShape,
    VariableNotFound,
)
from brace_templater.template import render


def test_foreach_repeats_block_for_each_list_item() -> None:
    template = "Hello world!\n{ foreach nums }Hello number { _ }!\n{ endfor }"

    rendered = render(template, {"nums": [143, 13, 3, 19999]})

    assert rendered == (
        "Hello world!\n"
        "Hello number 143!\n"
        "Hello number 13!\n"
        "Hello number 3!\n"
        "Hello number 19999!\n"
    )


def test_foreach_never_emits_loop_markers() -> None:
    rendered = render("{ foreach xs }[{ _ }]{ endfor }", {"xs": ["a"]})

    assert "foreach" not in rendered
    assert "endfor" not in rendered
    assert rendered == "[a]"


def test_foreach_over_empty_list_renders_nothing() -> None:
    assert render("a{ foreach xs }{ missing }{ endfor }b", {"xs": []}) == "ab"


def test_foreach_over_objects_with_member_access() -> None:
    entries = [
        {"name": "Python", "url": "https://www.python.org/"},
        {"name": "PyPI", "url": "https://pypi.org/"},
    ]
    template = "{ foreach entries }<a href=\"{ _.url }\">{ _.name }</a>{ endfor }"

    rendered = render(template, {"entries": entries})

    assert rendered == (
        '<a href="https://www.python.org/">Python</a>'
        '<a href="https://pypi.org/">PyPI</a>'
    )


def test_foreach_over_object_iterates_sorted_key_value_pairs() -> None:
    rendered = render("{ foreach links }{ _.key }={ _.value };{ endfor }", {"links": {"b": "2", "a": "1"}})

    assert rendered == "a=1;b=2;"


def test_outer_variables_are_visible_inside_loops() -> None:
    rendered = render("{ foreach xs }{ prefix }{ _ } { endfor }", {"xs": [1, 2], "prefix": "#"})

    assert rendered == "#1 #2 "


def test_nested_loops_shadow_loop_variable() -> None:
    template = "{ foreach rows }[{ foreach _.cells }{ _ }{ endfor }]{ endfor }"
    rows = [{"cells": [1, 2]}, {"cells": [3]}]

    assert render(template, {"rows": rows}) == "[12][3]"


def test_loop_variable_is_not_bound_outside_loops() -> None:
    with pytest.raises(VariableNotFound):
        render("{ foreach xs }{ endfor }{ _ }", {"xs": [1]})


def test_foreach_missing_collection() -> None:
    with pytest.raises(LoopVariableNotFound) as exc_info:
        render("ab{ foreach nums }{ endfor }", {})

    assert exc_info.value.name == "nums"
    assert exc_info.value.position == 2


def test_foreach_collection_with_dotted_name() -> None:
    assert render("{ foreach a.b }{ _ }{ endfor }", {"a.b": [1, 2]}) == "12"

    with pytest.raises(LoopVariableNotFound) as exc_info:
        render("{ foreach a. }{ endfor }", {"a": {"b": []}})
    assert exc_info.value.name == "a."


def test_foreach_over_scalar_is_unsupported() -> None:
    with pytest.raises(UnsupportedValueShape) as exc_info:
        render("{ foreach n }{ endfor }", {"n": 3})
    assert exc_info.value.shape == "integer"


def test_unmatched_foreach() -> None:
    with pytest.raises(UnmatchedForEach) as exc_info:
        render("{ foreach a }{ foreach b }{ endfor }", {"a": [], "b": []})
    assert exc_info.value.position == 0


def test_unmatched_endfor() -> None:
    with pytest.raises(UnmatchedEndFor) as exc_info:
        render("x { endfor }", {})
    assert exc_info.value.position == 2


def test_block_matching_happens_before_evaluation() -> None:
    # the missing variable comes first but the structural error wins
    with pytest.raises(UnmatchedForEach):
        render("{ missing }{ foreach xs }", {"xs": []})
