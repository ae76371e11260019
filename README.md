# tpzero

A small TCP client and server that talk over a simple binary protocol.

The client reads its settings from a configuration file and logs the lines
you type. It then connects to the server and sends one text message and one
*package* made of several values. The server accepts a single client. It
logs each message it gets and each value of each package, and stops when
the client disconnects.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running the server

```
tpzero-server [--port PORT] [--log PATH]
```

The server listens on port 4444 (or `--port`) on all IPv4 interfaces and
accepts one client. It logs at debug level to `log.log` (or `--log`) and to
the console. Frames with an unknown operation code are logged as a warning
and skipped. When the client disconnects, the server logs an error and exits
with status 1.

## Running the client

Create `cliente.config` in the working directory. It holds `KEY=VALUE`
lines; blank lines and lines starting with `#` are ignored:

```
IP=127.0.0.1
Puerto=4444
Valor=hello
```

Then start the client:

```
tpzero-client [--config PATH] [--log PATH]
```

The client logs to `tp0.log` (or `--log`) and to the console. It works in
two steps:

1. Each line you type at the `> ` prompt is logged. An empty line or end
   of input ends this step.
2. The client connects to the server and sends the `Valor` setting as a
   message. Each line you type after that is added to a package. An empty
   line or end of input sends the package and closes the connection.

If the configuration file cannot be read, or any of `IP`, `Puerto` or
`Valor` is missing from it, the client prints an error and exits with
status 1. A failure to connect is not caught and ends the client with the
socket error.

## Wire format

All integers are 4-byte signed little-endian values.

| Field          | Size      | Meaning                              |
|----------------|-----------|--------------------------------------|
| operation code | 4 bytes   | `0` = message, `1` = package         |
| payload size   | 4 bytes   | number of payload bytes that follow  |
| payload        | variable  | see below                            |

A message payload is the text, UTF-8 encoded, with a trailing NUL byte.
A package payload is a sequence of entries. Each entry is a 4-byte length
followed by that many bytes; text values are sent NUL-terminated.

## Library use

`tpzero.protocol` holds the building blocks:

```python
from tpzero.protocol import OpCode, Packet, encode_message, decode_values

packet = Packet()
packet.add("first")
packet.add("second")
frame = packet.serialize()

frame = encode_message("hello")
```

- `OpCode` is the enum of operation codes (`MESSAGE`, `PACKAGE`).
- `Packet.add(value)` appends a string (sent NUL-terminated) or raw bytes.
- `decode_values(payload)` turns a package payload back into its list of
  strings, raising `ValueError` on a truncated or malformed payload.
- `recv_exact(sock, size)` reads exactly `size` bytes, raising
  `ConnectionError` if the peer closes first.
- `receive_operation(sock)` returns the next `OpCode`, an `int` for an
  unknown code, or `None` (closing the socket) when the peer has gone.
- `receive_buffer(sock)` reads one size-prefixed payload.

`tpzero.client` offers `load_config`, `read_console`, `create_connection`,
`send_message` and `send_package`; `read_console` and `send_package` take
an optional iterable of lines in place of the prompt. `tpzero.server`
offers `start_server`, `wait_for_client`, `receive_message`,
`receive_package` and `serve`.

## What it does not do

The server handles exactly one client and then exits; it does not accept
further connections or serve clients concurrently. Neither side encrypts
or authenticates the connection.