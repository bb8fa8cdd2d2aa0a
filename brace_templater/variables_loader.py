from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from brace_templater.values import UnsupportedValueType, Value, to_value

logger = logging.getLogger(__name__)

SHEET_NAME_RE = re.compile(r"\s+")


class VariableLoadError(ValueError):
    """Raised when variable data cannot be parsed safely."""


@dataclass(frozen=True)
class VariablesStats:
    variable_count: int
    row_count: int
    skipped_rows: int


@dataclass(frozen=True)
class VariablesLoadResult:
    variables: dict[str, Value]
    stats: VariablesStats


def load_variables(file_path: str | Path) -> VariablesLoadResult:
    path = Path(file_path)
    if not path.exists():
        raise VariableLoadError(f"Variables file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        result = _load_json_variables(path)
    elif suffix in {".xlsx", ".xlsm"}:
        result = _load_xlsx_variables(path)
    else:
        raise VariableLoadError(f"Unsupported variables file format: {suffix}")

    logger.info("loaded %d variables from %s", result.stats.variable_count, path)
    return result


def _load_json_variables(path: Path) -> VariablesLoadResult:
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except json.JSONDecodeError as exc:
        raise VariableLoadError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise VariableLoadError("Invalid JSON format: expected object")

    variables: dict[str, Value] = {}
    for name, raw in payload.items():
        _reject_json_literals(raw, name)
        try:
            variables[name] = to_value(raw)
        except UnsupportedValueType as exc:
            raise VariableLoadError(f"Invalid value for variable '{name}': {exc}") from exc

    stats = VariablesStats(variable_count=len(variables), row_count=0, skipped_rows=0)
    return VariablesLoadResult(variables=variables, stats=stats)


def _reject_json_literals(raw: object, name: str) -> None:
    if raw is None or isinstance(raw, bool):
        raise VariableLoadError(f"Invalid value for variable '{name}': {json.dumps(raw)} is not supported")
    if isinstance(raw, dict):
        for key, item in raw.items():
            _reject_json_literals(item, f"{name}.{key}")
    elif isinstance(raw, list):
        for index, item in enumerate(raw):
            _reject_json_literals(item, f"{name}[{index}]")


def _load_xlsx_variables(path: Path) -> VariablesLoadResult:
    from openpyxl import load_workbook

    workbook = load_workbook(filename=path, read_only=True, data_only=True)
    try:
        sheets = [(worksheet.title, list(worksheet.iter_rows(values_only=True))) for worksheet in workbook.worksheets]
    finally:
        workbook.close()

    variables: dict[str, Value] = {}
    row_count = 0
    skipped_rows = 0
    for title, value_rows in sheets:
        name = _sheet_variable_name(title)
        if not value_rows:
            variables[name] = to_value([])
            continue

        headers = [_cell_to_text(value).strip() for value in value_rows[0]]
        if not any(headers):
            raise VariableLoadError(f"Sheet '{title}' has no header row")

        items: list[dict[str, object]] = []
        for row in value_rows[1:]:
            if all(_cell_to_text(value).strip() == "" for value in row):
                skipped_rows += 1
                continue
            row_count += 1
            items.append(
                {
                    header: _cell_to_object(row[idx] if idx < len(row) else None)
                    for idx, header in enumerate(headers)
                    if header
                }
            )
        variables[name] = to_value(items)

    stats = VariablesStats(variable_count=len(variables), row_count=row_count, skipped_rows=skipped_rows)
    return VariablesLoadResult(variables=variables, stats=stats)


def _sheet_variable_name(title: str) -> str:
    return SHEET_NAME_RE.sub("_", title.strip()).lower()


def _cell_to_object(value: object) -> object:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return value
    return _cell_to_text(value)


def _cell_to_text(value: object) -> str:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
