#!/usr/bin/env python3
"""
Wrapper script for brace_templater.worker.
Reads JSON-lines requests on stdin and writes events on stdout.
"""

from brace_templater.worker import main

if __name__ == "__main__":
    main()
