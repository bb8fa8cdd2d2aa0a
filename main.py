#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Render the link directory index page from config.py
"""

import logging
import sys

import config
from brace_templater.errors import TemplateError
from brace_templater.site import SiteConfigError, load_site_config, render_site
from brace_templater.variables_loader import VariableLoadError


def setup_logging(site):
    """Configure file and console logging for the command line run."""
    handlers = [logging.StreamHandler()]
    if site.log_file is not None:
        handlers.append(logging.FileHandler(site.log_file, encoding='utf-8'))

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=site.log_level, handlers=handlers, force=True)


def main():
    """Main entry point"""
    try:
        site = load_site_config(config)
    except SiteConfigError as exc:
        print(f"Invalid config.py: {exc}", file=sys.stderr)
        return 1

    setup_logging(site)
    logger = logging.getLogger(__name__)

    try:
        page = render_site(site)
    except TemplateError as exc:
        logger.error("template rendering failed: %s", exc)
        return 1
    except (SiteConfigError, VariableLoadError) as exc:
        logger.error("%s", exc)
        return 1

    if site.output_file is None:
        sys.stdout.write(page)
    else:
        site.output_file.parent.mkdir(parents=True, exist_ok=True)
        site.output_file.write_text(page, encoding='utf-8')
        logger.info("index page written to %s", site.output_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
