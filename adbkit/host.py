"""Commands sent to the ADB server itself (the ``host:`` services)."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from typing import Callable

from .protocol import FAIL, OKAY

Sender = Callable[[str], None]
Reader = Callable[[int], str]

_CONNECTED = re.compile(r"connected to|already connected")


class AdbError(RuntimeError):
    """The server refused a command or answered in an unexpected way."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class Device:
    """A device as listed by the server."""

    id: str
    type: str
    path: str = ""


class Command:
    """Base of all server commands.

    ``sender`` transmits one request string. ``reader(n)`` returns the next
    ``n`` bytes of the reply as text; ``reader(0)`` returns the next
    length-prefixed value.
    """

    def __init__(self, sender: Sender, reader: Reader):
        self._sender = sender
        self._reader = reader

    def _send(self, request: str) -> None:
        self._sender(request)

    def _read_reply(self) -> str:
        return self._reader(4)

    def _read_value(self) -> str:
        return self._reader(0)

    def _fail(self) -> AdbError:
        return AdbError(self._read_value())

    def _expect_okay(self, reply: str, label: str = "") -> None:
        """Return if ``reply`` is OKAY, raise the server's message on FAIL."""
        if reply == OKAY:
            return
        if reply == FAIL:
            raise self._fail()
        prefix = f"unexpected {label} response" if label else "unexpected response"
        raise AdbError(f"{prefix}: {reply}, expected OKAY or FAIL")


class ConnectCommand(Command):
    """Ask the server to connect to a device over TCP/IP."""

    def execute(self, host: str, port) -> str:
        """Return ``host:port`` once connected or already connected."""
        self._send(f"host:connect:{host}:{port}")
        self._expect_okay(self._read_reply())
        value = self._read_value()
        if _CONNECTED.search(value):
            return f"{host}:{port}"
        raise AdbError(value)


def _parse_tab_devices(value: str) -> list[Device]:
    devices = []
    for line in value.split("\n"):
        line = line.strip()
        if not line:
            continue
        parts = line.split("\t")
        if len(parts) != 2:
            raise AdbError(f"invalid device line: {line}")
        devices.append(Device(parts[0], parts[1]))
    return devices


class DevicesCommand(Command):
    """List the attached devices."""

    def execute(self) -> list[Device]:
        self._send("host:devices")
        self._expect_okay(self._read_reply())
        return self.parse_devices(self._read_value())

    def parse_devices(self, value: str) -> list[Device]:
        """Parse ``serial<TAB>state`` lines."""
        return _parse_tab_devices(value)


class DevicesWithPathsCommand(Command):
    """List the attached devices together with their device paths."""

    def execute(self) -> list[Device]:
        self._send("host:devices-l")
        self._expect_okay(self._read_reply())
        return self.parse_devices(self._read_value())

    def parse_devices(self, value: str) -> list[Device]:
        """Parse whitespace-separated ``serial state path ...`` lines."""
        devices = []
        for line in value.split("\n"):
            line = line.strip()
            if not line:
                continue
            parts = line.split()
            if len(parts) < 3:
                raise AdbError(f"invalid device line: {line}")
            devices.append(Device(parts[0], parts[1], parts[2]))
        return devices


class KillCommand(Command):
    """Stop the ADB server."""

    def execute(self) -> bool:
        self._send("host:kill")
        self._expect_okay(self._read_reply())
        return True


class VersionCommand(Command):
    """Ask for the server's protocol version."""

    def execute(self) -> int:
        self._send("host:version")
        reply = self._read_reply()
        if reply == OKAY:
            return self._parse_version(self._read_value())
        if reply == FAIL:
            raise self._fail()
        # Some servers answer with the version number directly.
        return self._parse_version(reply)

    @staticmethod
    def _parse_version(text: str) -> int:
        try:
            return int(text.strip(), 16)
        except ValueError as exc:
            raise AdbError(f"invalid version {text!r}") from exc


class TransportCommand(Command):
    """Switch the connection to talk to one device."""

    def execute(self, serial: str) -> bool:
        self._send(f"host:transport:{serial}")
        self._expect_okay(self._read_reply())
        return True


class DeviceTracker:
    """Reads device list updates and hands each list to ``on_track``."""

    def __init__(self, command: "TrackDevicesCommand"):
        self._command = command
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def tracking(self) -> bool:
        return self._thread is not None and not self._stop.is_set()

    def start(self) -> None:
        """Begin reading updates in the background."""
        if self.tracking:
            raise AdbError("already tracking")
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                devices = self._command.read_devices()
            except AdbError:
                continue
            except (EOFError, OSError):
                self._stop.set()
                return
            if self._stop.is_set():
                return
            if self._command.on_track is not None:
                self._command.on_track(devices)

    def stop(self) -> None:
        """Stop delivering updates."""
        self._stop.set()


class TrackDevicesCommand(Command):
    """Subscribe to device list changes."""

    def __init__(
        self,
        sender: Sender,
        reader: Reader,
        on_track: Callable[[list[Device]], None] | None = None,
    ):
        super().__init__(sender, reader)
        self.on_track = on_track

    def execute(self) -> DeviceTracker:
        self._send("host:track-devices")
        self._expect_okay(self._read_reply())
        return DeviceTracker(self)

    def read_devices(self) -> list[Device]:
        """Read one device list update."""
        return _parse_tab_devices(self._read_value())