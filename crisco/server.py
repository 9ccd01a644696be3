"""The TCP server that accepts connections and answers each one."""

from __future__ import annotations

import argparse
import logging
import os
import socket
from collections.abc import MutableMapping

from crisco.handlers import handle_error, handle_request
from crisco.http import RequestError, parse_request

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8887


def handle_client(
    conn: socket.socket,
    store: MutableMapping[str, str],
    expected_auth: str | None,
) -> None:
    """Read one request from a connection, answer it and close the connection."""
    with conn, conn.makefile("rb") as reader:
        try:
            request = parse_request(reader)
        except RequestError as error:
            logger.info("%s", error)
            response = handle_error(error)
        else:
            logger.info("Received %s request for path %s", request.method, request.path)
            response = handle_request(store, request, expected_auth)
        try:
            conn.sendall(response)
        except OSError as exc:
            logger.debug("Failed to send response: %s", exc)


def serve(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    store: MutableMapping[str, str] | None = None,
) -> None:
    """Accept connections forever, handling one at a time."""
    if store is None:
        store = {}
    with socket.create_server((host, port)) as listener:
        print(f"Listening on http://{host}:{port}", flush=True)
        while True:
            try:
                conn, _ = listener.accept()
            except OSError as exc:
                logger.error("Connection failed: %s", exc)
                continue
            handle_client(conn, store, os.environ.get("BASIC_AUTH", ""))


def main(argv: list[str] | None = None) -> int:
    """Run the URL shortener server."""
    parser = argparse.ArgumentParser(prog="crisco", description="A small URL shortener server.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        serve(args.host, args.port, {})
    except KeyboardInterrupt:
        pass
    return 0