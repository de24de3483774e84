#!/usr/bin/env python3
"""
Ruuvi Collector - Main Entry Point

Reads raw HCI dump output, decodes RuuviTag advertisements and stores a rate
limited stream of measurements.

Usage:
    python main.py --help                              # Show help
    hcidump --raw | python main.py collect             # Collect from stdin
    python main.py collect --input dump.txt            # Collect from a file
    python main.py decode "> 04 3E 2B 02 01 ..."       # Decode one line
    python main.py config                              # Show configuration

Environment Setup:
    Copy and configure the environment file:
    cp .env.sample .env
    # Edit .env with your settings

Requirements:
    - Python 3.8+
    - hcidump (BlueZ) for live collection
"""

import sys

from ruuvi_collector.cli.commands import cli


def check_environment():
    """Check if the environment is properly set up."""
    issues = []

    if sys.version_info < (3, 8):
        issues.append(f"Python 3.8+ required, found {sys.version_info.major}.{sys.version_info.minor}")

    return issues


def main():
    """Main entry point with environment validation."""
    issues = check_environment()
    if issues:
        print("Environment issues found:", file=sys.stderr)
        for issue in issues:
            print(f"   - {issue}", file=sys.stderr)
        sys.exit(1)

    try:
        cli()
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    main()
