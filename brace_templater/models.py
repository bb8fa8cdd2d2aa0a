from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Entry:
    name: str
    url: str


@dataclass(frozen=True)
class SiteConfig:
    index_template_file: Path
    variables_file: Path | None = None
    output_file: Path | None = None
    log_file: Path | None = None
    log_level: str = "INFO"
    entries: list[Entry] = field(default_factory=list)
