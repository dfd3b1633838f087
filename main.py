#!/usr/bin/env python3
"""CLI entrypoint for the TMDb directory renamer."""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

from cli import get_run_options
from config import ConfigError, load_config
from core.run import run
from logger import get_logger

log = get_logger()


def main(argv: list[str] | None = None) -> int:
    """Run the CLI entrypoint.

    Returns:
        Process exit code.
    """
    options = get_run_options(argv)
    # Exported variables win over .env entries.
    load_dotenv(Path.cwd() / ".env", override=False)

    if options.root is None:
        log.error("Missing required argument: --DIR (see --help)")
        return 1
    if not options.root.is_dir():
        log.error(f"Directory '{options.root}' does not exist.")
        return 1

    if options.config_path:
        if not options.config_path.exists():
            log.error(f"Config path not found: {options.config_path}")
            return 1
        if options.config_path.is_dir():
            log.error(f"Config path must be a file: {options.config_path}")
            return 1

    try:
        cfg = load_config(options.config_path, options.to_overrides())
    except ConfigError as exc:
        log.error(str(exc))
        return 1
    log.set_level(cfg.log.level)
    return run(options, cfg)


if __name__ == "__main__":
    raise SystemExit(main())
