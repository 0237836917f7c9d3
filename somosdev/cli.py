"""Command-line entry point that loads settings and starts the server."""

from __future__ import annotations

import argparse
import logging
import os
import sqlite3
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from dotenv import load_dotenv

from somosdev.server import Config, Server

logger = logging.getLogger(__name__)

ENV_FILE = ".env"
ENV_VAR = "APP_ENV"
PRODUCTION = "production"
DEFAULT_ADDR = ":8080"


def build_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build the server settings from environment variables."""
    environ = os.environ if environ is None else environ
    return Config(is_dev=environ.get(ENV_VAR) != PRODUCTION, addr=DEFAULT_ADDR)


def main(argv: Sequence[str] | None = None) -> int:
    """Load ``.env``, build the server and run it; return the exit status."""
    parser = argparse.ArgumentParser(prog="somosdev", description="Serve the posts site.")
    parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    env_path = Path(ENV_FILE)
    if not env_path.is_file():
        logger.error(
            "could not load environment variables err=open %s: no such file", ENV_FILE
        )
        return 1
    load_dotenv(dotenv_path=env_path)

    try:
        server = Server(build_config())
    except (sqlite3.Error, OSError) as exc:
        logger.error("could not open DB err=%s", exc)
        return 1

    server.add_routes()
    try:
        server.run()
    except (OSError, ValueError) as exc:
        logger.error("could not start server err=%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())