"""Module entrypoint for running the CLI (``python -m tmdb_dir_renamer``)."""

from __future__ import annotations

from main import main

if __name__ == "__main__":
    raise SystemExit(main())
