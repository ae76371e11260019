import logging
import socket

import pytest

from tpzero import server
from tpzero.protocol import Packet, encode_message


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


def _package(*values):
    packet = Packet()
    for value in values:
        packet.add(value)
    return packet.serialize()


def test_start_and_accept():
    with server.start_server("0", "127.0.0.1") as listening:
        host, port = listening.getsockname()
        assert host == "127.0.0.1"
        with socket.create_connection((host, port)) as peer:
            with server.wait_for_client(listening) as conn:
                peer.sendall(b"hi")
                assert conn.recv(2) == b"hi"


def test_receive_message(pair, caplog):
    a, b = pair
    a.sendall(encode_message("hola")[4:])
    with caplog.at_level(logging.INFO):
        assert server.receive_message(b) == "hola"
    assert "Me llego el mensaje hola" in caplog.text


def test_receive_package(pair):
    a, b = pair
    a.sendall(_package("uno", "dos")[4:])
    assert server.receive_package(b) == ["uno", "dos"]


def test_serve_until_disconnect(pair, caplog):
    a, b = pair
    a.sendall(encode_message("hola"))
    a.sendall(_package("x", "y"))
    a.sendall((9).to_bytes(4, "little"))
    a.close()
    logger = logging.getLogger("test.serve")
    with caplog.at_level(logging.INFO):
        assert server.serve(b, logger) is None
    served = [r.getMessage() for r in caplog.records if r.name == "test.serve"]
    assert served == [
        "Me llegaron los siguientes valores:\n",
        "x",
        "y",
        "Operacion desconocida. No quieras meter la pata",
        "el cliente se desconecto. Terminando servidor",
    ]
    assert "Me llego el mensaje hola" in caplog.text
    assert b.fileno() == -1


def test_serve_disconnect_mid_frame(pair, caplog):
    a, b = pair
    a.sendall(encode_message("hola")[:6])
    a.close()
    logger = logging.getLogger("test.serve.partial")
    with caplog.at_level(logging.ERROR):
        server.serve(b, logger)
    assert "el cliente se desconecto. Terminando servidor" in caplog.text