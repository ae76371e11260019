"""Client that reads its settings, logs console input and sends it to the server."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from collections.abc import Iterable, Iterator

from tpzero.protocol import Packet, encode_message

LOG_PATH = "tp0.log"
CONFIG_PATH = "cliente.config"
_FORMAT = "[%(levelname)s] %(asctime)s %(name)s - %(message)s"


class ConfigError(Exception):
    """The configuration file is missing or lacks a required key."""


def create_logger(path: str = LOG_PATH) -> logging.Logger:
    """Return the client logger, writing to ``path`` and to the console."""
    logger = logging.getLogger("TP0")
    _close_logger(logger)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    formatter = logging.Formatter(_FORMAT)
    for handler in (logging.FileHandler(path, encoding="utf-8"), logging.StreamHandler()):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def _close_logger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def load_config(path: str = CONFIG_PATH) -> dict[str, str]:
    """Read ``KEY=VALUE`` lines; blank lines and ``#`` comments are ignored."""
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError as exc:
        raise ConfigError(f"cannot read config {path!r}: {exc}") from exc
    config: dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if sep:
            config[key.strip()] = value.strip()
    return config


def _require(config: dict[str, str], key: str) -> str:
    try:
        return config[key]
    except KeyError:
        raise ConfigError(f"the config file has no key {key}") from None


def _prompt_lines() -> Iterator[str]:
    while True:
        try:
            line = input("> ")
        except EOFError:
            return
        yield line


def read_console(logger: logging.Logger, lines: Iterable[str] | None = None) -> list[str]:
    """Log each line until an empty one or the end of input; return the lines read."""
    source = _prompt_lines() if lines is None else iter(lines)
    read: list[str] = []
    for line in source:
        if line == "":
            break
        logger.info(">> %s", line)
        read.append(line)
    return read


def create_connection(ip: str, port: str | int) -> socket.socket:
    """Open a TCP connection over IPv4 to ``ip``:``port``."""
    last_error: OSError | None = None
    for family, socktype, proto, _, address in socket.getaddrinfo(
        ip, port, socket.AF_INET, socket.SOCK_STREAM
    ):
        sock = socket.socket(family, socktype, proto)
        try:
            sock.connect(address)
        except OSError as exc:
            sock.close()
            last_error = exc
            continue
        return sock
    raise last_error or OSError(f"no address found for {ip}:{port}")


def send_message(message: str, sock: socket.socket) -> None:
    """Send a single text message."""
    sock.sendall(encode_message(message))


def send_package(sock: socket.socket, lines: Iterable[str] | None = None) -> Packet:
    """Gather lines until an empty one or the end of input and send them as one package."""
    source = _prompt_lines() if lines is None else iter(lines)
    packet = Packet()
    for line in source:
        if line == "":
            break
        packet.add(line)
    sock.sendall(packet.serialize())
    return packet


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tpzero-client")
    parser.add_argument("--config", default=CONFIG_PATH)
    parser.add_argument("--log", default=LOG_PATH)
    args = parser.parse_args(argv)

    logger = create_logger(args.log)
    try:
        logger.info("Hola! Soy un log")
        config = load_config(args.config)
        ip = _require(config, "IP")
        logger.info("La IP leída es: %s", ip)
        port = _require(config, "Puerto")
        logger.info("El Puerto leído es: %s", port)
        value = _require(config, "Valor")
        logger.info("El Valor leído es: %s", value)

        lines = _prompt_lines()
        read_console(logger, lines)

        with create_connection(ip, port) as sock:
            send_message(value, sock)
            send_package(sock, lines)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        _close_logger(logger)
    return 0


if __name__ == "__main__":
    sys.exit(main())