#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Site configuration
Edit the values below to change what main.py renders
"""

# ==================== Template configuration ====================
# Index page template ({ visitors } and { foreach entries } are available)
INDEX_TEMPLATE_FILE = 'website/index.html'

# Extra variables merged into the index page (.json or .xlsx, optional)
VARIABLES_FILE = None

# ==================== Directory configuration ====================
# Initial name -> URL entries shown on the index page
SITE_ENTRIES = {
    'Python': 'https://www.python.org/',
    'PyPI': 'https://pypi.org/',
}

# ==================== Output configuration ====================
# Rendered page path (None prints to stdout)
OUTPUT_FILE = None

# Log file path (None logs to the console only)
LOG_FILE = 'templater_log.txt'
LOG_LEVEL = 'INFO'
