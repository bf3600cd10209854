#!/usr/bin/env python3
"""Entry point for the AWX syslog bridge."""

import sys

from awx_syslog.cli import main

if __name__ == "__main__":
    sys.exit(main())
