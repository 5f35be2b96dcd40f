"""Module entrypoint for running bundlewriter as ``python -m bundlewriter``."""

from __future__ import annotations

from bundlewriter.cli import main


if __name__ == "__main__":
    main()
