#!/usr/bin/env python3
"""phx entry point for running from a source checkout."""

import sys

try:
    import aiohttp  # noqa
    import aiofiles  # noqa
    import typer  # noqa
except ImportError as e:
    print(f"Critical import failed: {e}")
    print("Please run: pip install -e .")
    sys.exit(1)


def main():
    from phx.cli import main as cli_main

    cli_main()


if __name__ == "__main__":
    main()
