#!/usr/bin/env python3
"""
Package entry point for the Arc Folder Archiver.

This allows the package to be executed with: python -m arc_archiver
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
