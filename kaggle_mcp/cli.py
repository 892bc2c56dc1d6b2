"""Command that runs the Kaggle MCP server on standard input and output."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from dotenv import find_dotenv, load_dotenv

from .server import KaggleMcpServer

log = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    """Start the server and answer MCP messages until standard input closes."""
    parser = argparse.ArgumentParser(
        prog="kaggle-mcp",
        description="Serve the Kaggle API to MCP clients over standard input and output.",
    )
    parser.parse_args(argv)

    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path)

    # Logs go to stderr so that stdout carries protocol messages only.
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log.info("Starting Kaggle MCP server")

    server = KaggleMcpServer()
    try:
        server.serve(sys.stdin, sys.stdout)
    except Exception:
        log.exception("Server error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())