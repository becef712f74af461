# adbkit

A Python library of building blocks for talking to an Android Debug Bridge
(ADB) server and handling the data it exchanges.

- `adbkit.protocol` – the length-prefixed host wire format and the sync
  header format (`encode_data`, `decode_data`, `encode_message`,
  `format_sync`, `format_sync_request`, `parse_sync_response`, ...), raising
  `ProtocolError` on malformed input.
- `adbkit.parser` – `Parser`, which reads fixed-size fields, framed values and
  lines from a binary stream, with `FailError`, `PrematureEOFError` and
  `UnexpectedDataError`.
- `adbkit.host` – server commands: `ConnectCommand`, `DevicesCommand`,
  `DevicesWithPathsCommand`, `KillCommand`, `VersionCommand`,
  `TransportCommand` and `TrackDevicesCommand` with its `DeviceTracker`.
- `adbkit.host_serial` – per-device server commands: `GetDevicePathCommand`,
  `ForwardCommand`, `GetSerialNoCommand`, `ListForwardsCommand`,
  `WaitForDeviceCommand`.
- `adbkit.host_transport` – device commands: `GetFeaturesCommand`,
  `GetPackagesCommand`, `GetPropertiesCommand`, `ListReversesCommand`,
  `ClearCommand`, `InstallCommand`, `UninstallCommand`, plus `escape_compat`.
- `adbkit.sync.stats` – `Stats` and `Entry` for file modes, sizes and times;
  `adbkit.sync.transfer` – `PushTransfer` and `PullTransfer` progress streams.
- `adbkit.tcpusb` – transport packets (`packet.assemble`, `packet.parse`,
  `packet.Command`), `PacketReader`, `Service`, `ServiceMap` and
  `RollingCounter`.
- `adbkit.auth` – parsing ADB-generated RSA public keys into `AdbPublicKey`
  and converting them to PEM or OpenSSH; `adbkit.fingerprint` keeps a
  registry of fingerprints and comments.
- Helpers: `adbkit.linetransform` (CRLF to LF conversion), `adbkit.rgbtransform`
  (raw framebuffer pixels to packed RGB), `adbkit.proc_stat` (CPU load from
  `/proc/stat`), `adbkit.keycode` (the `KeyCode` enum), `adbkit.dump`
  (optional traffic recording, switched on by the `ADBKIT_DUMP` environment
  variable) and `adbkit.util`.

## Installation

```
pip install .
```

Python 3.10 or later is required.

## Command line

Show the fingerprint and comment of an ADB public key:

```
adbkit pubkey-fingerprint ~/.android/adbkey.pub
```

Convert an ADB public key to PEM (the default) or OpenSSH format:

```
adbkit pubkey-convert ~/.android/adbkey.pub --format openssh
```

Extract the key codes from a `KeyEvent.java` file served at a URL. With a
destination file a Python module of constants is written; without one the
codes are listed as `NAME: value`:

```
adbkit-keycodes --url https://example.com/KeyEvent.java keycodes.py
adbkit-keycodes --url https://example.com/KeyEvent.java
```

## Library examples

Encoding a host request and decoding a reply:

```python
from adbkit import protocol

assert protocol.encode_data(b"host:version") == b"000Chost:version"
assert protocol.decode_data(b"0005hello") == b"hello"
```

Reading a server reply from a stream:

```python
import io
from adbkit.parser import Parser

parser = Parser(io.BytesIO(b"OKAY0004abcd"))
assert parser.read_ascii(4) == "OKAY"
assert parser.read_value() == b"abcd"
```

Running a command. Commands take a `sender` that transmits one request
string and a `reader` where `reader(n)` returns the next `n` bytes of the
reply and `reader(0)` returns the next length-prefixed value:

```python
from adbkit.host import Device, DevicesCommand

sent = []
replies = iter(["OKAY", "example-serial\tdevice\n"])
command = DevicesCommand(sent.append, lambda n: next(replies))

assert command.execute() == [Device("example-serial", "device")]
assert sent == ["host:devices"]
```

Building and parsing a TCP/USB transport packet:

```python
from adbkit.tcpusb import packet

raw = packet.assemble(packet.Command.OKAY, 1, 2)
parsed = packet.parse(raw)
assert parsed.verify_magic() and parsed.arg1 == 2
```

Inspecting a file mode reported by the sync protocol:

```python
from datetime import datetime, timezone
from adbkit.sync.stats import Stats

stats = Stats(mode=0o100644, size=12, mtime=datetime.now(timezone.utc))
assert stats.is_regular() and stats.permissions() == 0o644
```

Errors are raised as exceptions (`AdbError`, `InstallError`, `FailError`,
`PrematureEOFError`, `UnexpectedDataError`, `ProtocolError`,
`PublicKeyError`, `ChecksumError`, `MagicError`, `ServiceError`) rather than
returned as status values.

## What this package does not do

- It has no client object that opens a socket to the ADB server or starts
  the server; commands work over whatever `sender` and `reader` you supply.
- It has no sync session that pushes or pulls files over a connection;
  only file stats and transfer progress streams are provided.
- It has no TCP listener for the TCP/USB bridge; `Service` by default echoes
  stream data back unless given a `transport_factory`, and there is no
  authentication handshake.
- It does not take screenshots, run logcat or monkey, or reboot devices.

## Running the tests

```
pip install ".[test]"
pytest
```