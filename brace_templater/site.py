from __future__ import annotations

import logging
from pathlib import Path
from types import ModuleType

from brace_templater.directory import LinkDirectory, build_index_variables
from brace_templater.models import Entry, SiteConfig
from brace_templater.template import render
from brace_templater.variables_loader import load_variables

logger = logging.getLogger(__name__)

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class SiteConfigError(ValueError):
    """Raised when config.py cannot build a valid site config."""


def load_site_config(config: ModuleType) -> SiteConfig:
    index_template_file = Path(getattr(config, "INDEX_TEMPLATE_FILE", "website/index.html"))

    log_level = str(getattr(config, "LOG_LEVEL", "INFO")).strip().upper()
    if log_level not in LOG_LEVELS:
        raise SiteConfigError(f"Unknown LOG_LEVEL: {log_level}")

    raw_entries = getattr(config, "SITE_ENTRIES", {})
    if not isinstance(raw_entries, dict):
        raise SiteConfigError("SITE_ENTRIES must be a dict of name -> url")
    entries = [Entry(name=str(name), url=str(url)) for name, url in raw_entries.items()]

    return SiteConfig(
        index_template_file=index_template_file,
        variables_file=_optional_path(getattr(config, "VARIABLES_FILE", None)),
        output_file=_optional_path(getattr(config, "OUTPUT_FILE", None)),
        log_file=_optional_path(getattr(config, "LOG_FILE", None)),
        log_level=log_level,
        entries=entries,
    )


def create_directory(site: SiteConfig) -> LinkDirectory:
    return LinkDirectory({entry.name: entry.url for entry in site.entries})


def render_site(site: SiteConfig, directory: LinkDirectory | None = None) -> str:
    """Render the index page with the directory plus the optional variables file.

    Index variables (``visitors``, ``entries``) take precedence over names
    loaded from the variables file.
    """
    if not site.index_template_file.exists():
        raise SiteConfigError(f"Index template not found: {site.index_template_file}")
    template = site.index_template_file.read_text(encoding="utf-8")

    if directory is None:
        directory = create_directory(site)
    variables: dict[str, object] = {}
    if site.variables_file is not None:
        variables.update(load_variables(site.variables_file).variables)

    visits = directory.record_visit()
    variables.update(build_index_variables(directory.snapshot(), visits))
    logger.info("rendering %s with %d variables", site.index_template_file, len(variables))
    return render(template, variables)


def _optional_path(value: object) -> Path | None:
    if value is None or str(value).strip() == "":
        return None
    return Path(str(value))
