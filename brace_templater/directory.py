from __future__ import annotations

import logging
import threading
from html import escape
from urllib.parse import parse_qs

from brace_templater.models import Entry
from brace_templater.template import render

logger = logging.getLogger(__name__)

ENTRY_NAME_FIELD = "entry_name"
ENTRY_URL_FIELD = "entry_url"


class EntryFormError(ValueError):
    """Raised when an add-entry form payload is malformed."""


class LinkDirectory:
    """In-memory name -> URL directory shared between callers.

    Readers take a point-in-time copy with :meth:`snapshot` and render from
    that copy, so the lock is never held while a template is rendered.
    """

    def __init__(self, entries: dict[str, str] | None = None):
        self._entries: dict[str, str] = {}
        self._visits = 0
        self._lock = threading.Lock()
        for name, url in (entries or {}).items():
            self.add(name, url)

    def add(self, name: str, url: str) -> Entry:
        entry = _normalize_entry(name, url)
        with self._lock:
            self._entries[entry.name] = entry.url
        logger.info("directory entry added: %s -> %s", entry.name, entry.url)
        return entry

    def snapshot(self) -> dict[str, str]:
        with self._lock:
            return dict(self._entries)

    def record_visit(self) -> int:
        with self._lock:
            self._visits += 1
            return self._visits

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def parse_add_entry_form(body: str) -> Entry:
    """Parse an ``entry_name=...&entry_url=...`` urlencoded form body."""
    try:
        fields = parse_qs(body, keep_blank_values=True, strict_parsing=True)
    except ValueError as exc:
        raise EntryFormError(f"malformed add_entry form payload: {exc}") from exc

    missing = [key for key in (ENTRY_NAME_FIELD, ENTRY_URL_FIELD) if key not in fields]
    if missing:
        raise EntryFormError(f"malformed add_entry form payload: missing {', '.join(missing)}")
    return _normalize_entry(fields[ENTRY_NAME_FIELD][0], fields[ENTRY_URL_FIELD][0])


def build_index_variables(entries: dict[str, str], visits: int) -> dict[str, object]:
    """Build the index page variables, HTML-escaping the user supplied entries."""
    return {
        "visitors": visits,
        "entries": [{"name": escape(name), "url": escape(entries[name])} for name in sorted(entries)],
    }


def render_index(template: str, directory: LinkDirectory) -> str:
    visits = directory.record_visit()
    entries = directory.snapshot()
    return render(template, build_index_variables(entries, visits))


def _normalize_entry(name: str, url: str) -> Entry:
    normalized_name = str(name).strip()
    normalized_url = str(url).strip()
    if not normalized_name:
        raise EntryFormError("entry name must not be empty")
    if not normalized_url:
        raise EntryFormError("entry url must not be empty")
    return Entry(name=normalized_name, url=normalized_url)
