#!/usr/bin/env python3
"""
Polykalk: numeric calculator and Newton equation solver

Main entry point for the Polykalk application.
This file serves as a thin wrapper that delegates all functionality
to the polykalk_pkg package.

Usage:
    python polykalk.py                          # Interactive REPL
    python polykalk.py -e "sum(2*x, 1, 10)"     # Evaluate one command
    python polykalk.py --help                   # Show help
"""

from __future__ import annotations

import sys


def main() -> int:
    """
    Main entry point for Polykalk.

    Delegates to polykalk_pkg.cli, which handles argument parsing,
    command evaluation and output formatting.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    from polykalk_pkg.cli import main_entry

    try:
        return main_entry(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
