"""Module entrypoint for running Notevoice as ``python -m notevoice``."""

from __future__ import annotations

from notevoice.cli import main


if __name__ == "__main__":
    main()
