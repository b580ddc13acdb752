#!/usr/bin/env python3
"""
Convenience shim to run subgrab from a source checkout.
Usage: python subgrab.py MOVIE [--language CODE] [--top N]
"""

from subgrab.cli import main


if __name__ == "__main__":
    main()
