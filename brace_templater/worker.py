from __future__ import annotations

import json
import logging
import sys
import threading
from pathlib import Path
from typing import Any

from brace_templater.directory import EntryFormError, LinkDirectory, parse_add_entry_form, render_index
from brace_templater.errors import TemplateError
from brace_templater.template import render
from brace_templater.variables_loader import VariableLoadError, load_variables

logger = logging.getLogger(__name__)

TEMPLATE_ERROR_MESSAGE = "template rendering failed"


class RequestError(ValueError):
    """Raised when a worker message payload is incomplete."""


class JsonLineWriter:
    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self._lock = threading.Lock()

    def write_line(self, payload: dict[str, Any]) -> None:
        text = json.dumps(payload, ensure_ascii=False)
        with self._lock:
            self.stream.write(text + "\n")
            self.stream.flush()


class Worker:
    def __init__(self, writer=None, directory: LinkDirectory | None = None):
        self.writer = writer or JsonLineWriter()
        self.directory = directory if directory is not None else LinkDirectory()

    def handle_message(self, message: dict[str, Any]) -> None:
        message_type = str(message.get("type", "")).strip()
        payload = message.get("payload", {}) or {}
        try:
            if message_type == "render":
                self._handle_render(payload)
            elif message_type == "load_variables":
                self._handle_load_variables(payload)
            elif message_type == "add_entry":
                self._handle_add_entry(payload)
            elif message_type == "render_index":
                self._handle_render_index(payload)
            else:
                self.writer.write_line({"type": "error", "error": f"Unknown message type: {message_type}"})
        except TemplateError as exc:
            # details stay in the log, callers only get the generic message
            logger.error("%s: %s", TEMPLATE_ERROR_MESSAGE, exc)
            self.writer.write_line({"type": "error", "code": "template_error", "error": TEMPLATE_ERROR_MESSAGE})
        except (RequestError, VariableLoadError, EntryFormError) as exc:
            self.writer.write_line({"type": "error", "error": str(exc)})
        except Exception as exc:
            logger.exception("unexpected worker failure")
            self.writer.write_line({"type": "error", "error": str(exc)})

    def _handle_render(self, payload: dict[str, Any]) -> None:
        template = _resolve_template(payload)
        variables: dict[str, object] = {}
        variables_file = payload.get("variables_file")
        if variables_file:
            variables.update(load_variables(str(variables_file).strip()).variables)
        inline_variables = payload.get("variables") or {}
        if not isinstance(inline_variables, dict):
            raise RequestError("variables must be an object")
        variables.update(inline_variables)

        self.writer.write_line({"type": "rendered", "output": render(template, variables)})

    def _handle_load_variables(self, payload: dict[str, Any]) -> None:
        path = payload.get("path")
        if not path:
            raise RequestError("Missing variables file path")

        result = load_variables(str(path).strip())
        self.writer.write_line(
            {
                "type": "variables_loaded",
                "names": sorted(result.variables),
                "stats": {
                    "variable_count": result.stats.variable_count,
                    "row_count": result.stats.row_count,
                    "skipped_rows": result.stats.skipped_rows,
                },
            }
        )

    def _handle_add_entry(self, payload: dict[str, Any]) -> None:
        form = payload.get("form")
        if form is not None:
            parsed = parse_add_entry_form(str(form))
            name, url = parsed.name, parsed.url
        else:
            name, url = str(payload.get("name", "")), str(payload.get("url", ""))
        entry = self.directory.add(name, url)
        self.writer.write_line(
            {
                "type": "entry_added",
                "name": entry.name,
                "url": entry.url,
                "count": len(self.directory),
            }
        )

    def _handle_render_index(self, payload: dict[str, Any]) -> None:
        template = _resolve_template(payload)
        self.writer.write_line({"type": "rendered", "output": render_index(template, self.directory)})


def _resolve_template(payload: dict[str, Any]) -> str:
    if "template" in payload and payload["template"] is not None:
        return str(payload["template"])

    template_file = payload.get("template_file")
    if template_file:
        path = Path(str(template_file).strip())
        if not path.exists() or not path.is_file():
            raise RequestError(f"Template file not found: {path}")
        return path.read_text(encoding="utf-8")

    raise RequestError("Missing template or template_file")


def main() -> None:
    worker = Worker()
    for line in sys.stdin:
        raw = line.strip()
        if not raw:
            continue
        try:
            message = json.loads(raw)
        except json.JSONDecodeError as exc:
            worker.writer.write_line({"type": "error", "error": f"Invalid JSON: {exc}"})
            continue
        if not isinstance(message, dict):
            worker.writer.write_line({"type": "error", "error": "Message must be a JSON object"})
            continue
        worker.handle_message(message)


if __name__ == "__main__":
    main()
