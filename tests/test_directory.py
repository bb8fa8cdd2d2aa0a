import threading

import pytest

from brace_templater.directory import (
    EntryFormError,
    LinkDirectory,
    build_index_variables,
    parse_add_entry_form,
    render_index,
)
from brace_templater.models import Entry


def test_parse_add_entry_form_decodes_fields() -> None:
    entry = parse_add_entry_form("entry_name=My+Site&entry_url=https%3A%2F%2Fexample.com%2F%3Fa%3D1")

    assert entry == Entry(name="My Site", url="https://example.com/?a=1")


@pytest.mark.parametrize(
    "body",
    [
        "",
        "entry_name=a",
        "entry_url=https://example.com",
        "entry_name=&entry_url=https://example.com",
        "garbage",
    ],
)
def test_parse_add_entry_form_rejects_malformed_payloads(body: str) -> None:
    with pytest.raises(EntryFormError):
        parse_add_entry_form(body)


def test_directory_add_replaces_existing_name() -> None:
    directory = LinkDirectory({"a": "https://a.example/"})

    directory.add("a", "https://new.example/")

    assert directory.snapshot() == {"a": "https://new.example/"}
    assert len(directory) == 1


def test_snapshot_is_a_copy() -> None:
    directory = LinkDirectory()
    snapshot = directory.snapshot()

    directory.add("a", "https://a.example/")

    assert snapshot == {}


def test_record_visit_counts_across_threads() -> None:
    directory = LinkDirectory()
    threads = [threading.Thread(target=lambda: [directory.record_visit() for _ in range(100)]) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert directory.record_visit() == 401


def test_build_index_variables_sorts_entries() -> None:
    variables = build_index_variables({"b": "https://b/", "a": "https://a/"}, 7)

    assert variables == {
        "visitors": 7,
        "entries": [{"name": "a", "url": "https://a/"}, {"name": "b", "url": "https://b/"}],
    }


def test_render_index_counts_visits() -> None:
    directory = LinkDirectory({"Python": "https://www.python.org/"})
    template = "{ visitors }:{ foreach entries }{ _.name }={ _.url }{ endfor }"

    assert render_index(template, directory) == "1:Python=https://www.python.org/"
    assert render_index(template, directory).startswith("2:")


def test_index_entries_are_html_escaped() -> None:
    directory = LinkDirectory({"<b>Tools</b>": 'https://x.test/?a=1&b="2"'})
    template = '{ foreach entries }<a href="{ _.url }">{ _.name }</a>{ endfor }'

    rendered = render_index(template, directory)

    assert rendered == '<a href="https://x.test/?a=1&amp;b=&quot;2&quot;">&lt;b&gt;Tools&lt;/b&gt;</a>'
    assert directory.snapshot() == {"<b>Tools</b>": 'https://x.test/?a=1&b="2"'}
