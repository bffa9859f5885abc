"""Module entrypoint for running mstts as ``python -m mstts``."""

from __future__ import annotations

from mstts.cli import main


if __name__ == "__main__":
    main()
