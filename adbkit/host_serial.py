"""Commands addressed to one device through the server (``host-serial:``)."""

from __future__ import annotations

from dataclasses import dataclass

from .host import AdbError, Command


@dataclass(frozen=True)
class Forward:
    """One port forwarding rule."""

    serial: str
    local: str
    remote: str


class GetDevicePathCommand(Command):
    """Ask for the device path of a device."""

    def execute(self, serial: str) -> str:
        self._send(f"host-serial:{serial}:get-devpath")
        self._expect_okay(self._read_reply())
        return self._read_value()


class ForwardCommand(Command):
    """Forward a local socket to a socket on the device."""

    def execute(self, serial: str, local: str, remote: str) -> bool:
        self._send(f"host-serial:{serial}:forward:{local};{remote}")
        self._expect_okay(self._read_reply(), "first")
        self._expect_okay(self._read_reply(), "second")
        return True


class GetSerialNoCommand(Command):
    """Ask for the serial number of a device."""

    def execute(self, serial: str) -> str:
        self._send(f"host-serial:{serial}:get-serialno")
        self._expect_okay(self._read_reply())
        return self._read_value()


class ListForwardsCommand(Command):
    """List the port forwarding rules of a device."""

    def execute(self, serial: str) -> list[Forward]:
        self._send(f"host-serial:{serial}:list-forward")
        self._expect_okay(self._read_reply())
        return self._parse_forwards(self._read_value())

    @staticmethod
    def _parse_forwards(value: str) -> list[Forward]:
        forwards = []
        for line in value.strip().split("\n"):
            line = line.strip()
            if not line:
                continue
            parts = line.split()
            if len(parts) != 3:
                raise AdbError(f"invalid forward format: {line}")
            forwards.append(Forward(*parts))
        return forwards


class WaitForDeviceCommand(Command):
    """Wait until a device is available; returns its serial."""

    def execute(self, serial: str) -> str:
        self._send(f"host-serial:{serial}:wait-for-any")
        self._expect_okay(self._read_reply(), "first")
        self._expect_okay(self._read_reply(), "second")
        return serial