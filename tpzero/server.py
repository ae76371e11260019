"""Server that accepts one client and logs the messages and packages it sends."""

from __future__ import annotations

import argparse
import logging
import socket
import sys

from tpzero.protocol import OpCode, decode_values, receive_buffer, receive_operation

PORT = "4444"
LOG_PATH = "log.log"
_FORMAT = "[%(levelname)s] %(asctime)s %(name)s - %(message)s"

_log = logging.getLogger("Servidor")


def start_server(port: str | int = PORT, host: str | None = None) -> socket.socket:
    """Open a listening IPv4 TCP socket on ``port``."""
    family, socktype, proto, _, address = socket.getaddrinfo(
        host, port, socket.AF_INET, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
    )[0]
    server = socket.socket(family, socktype, proto)
    try:
        reuse = getattr(socket, "SO_REUSEPORT", socket.SO_REUSEADDR)
        server.setsockopt(socket.SOL_SOCKET, reuse, 1)
        server.bind(address)
        server.listen(socket.SOMAXCONN)
    except OSError:
        server.close()
        raise
    _log.debug("Listo para escuchar a mi cliente")
    return server


def wait_for_client(server: socket.socket) -> socket.socket:
    """Accept one client connection."""
    conn, _ = server.accept()
    _log.info("Se conecto un cliente!")
    return conn


def receive_message(sock: socket.socket) -> str:
    """Read and log a text message."""
    message = receive_buffer(sock).split(b"\0", 1)[0].decode("utf-8", errors="replace")
    _log.info("Me llego el mensaje %s", message)
    return message


def receive_package(sock: socket.socket) -> list[str]:
    """Read a package and return its values."""
    return decode_values(receive_buffer(sock))


def serve(sock: socket.socket, logger: logging.Logger | None = None) -> None:
    """Handle frames from one client until it disconnects."""
    logger = logger or _log
    while True:
        try:
            op = receive_operation(sock)
            if op is OpCode.MESSAGE:
                receive_message(sock)
            elif op is OpCode.PACKAGE:
                values = receive_package(sock)
                logger.info("Me llegaron los siguientes valores:\n")
                for value in values:
                    logger.info("%s", value)
            elif op is not None:
                logger.warning("Operacion desconocida. No quieras meter la pata")
        except ConnectionError:
            sock.close()
            op = None
        if op is None:
            logger.error("el cliente se desconecto. Terminando servidor")
            return


def _configure_logging(path: str) -> None:
    _log.setLevel(logging.DEBUG)
    _log.propagate = False
    formatter = logging.Formatter(_FORMAT)
    for handler in (logging.FileHandler(path, encoding="utf-8"), logging.StreamHandler()):
        handler.setFormatter(formatter)
        _log.addHandler(handler)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tpzero-server")
    parser.add_argument("--port", default=PORT)
    parser.add_argument("--log", default=LOG_PATH)
    args = parser.parse_args(argv)

    _configure_logging(args.log)
    with start_server(args.port) as server:
        _log.info("Servidor listo para recibir al cliente")
        conn = wait_for_client(server)
        serve(conn, _log)
    return 1


if __name__ == "__main__":
    sys.exit(main())