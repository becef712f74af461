"""Commands run on one device through an established transport."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass

from .host import AdbError, Command
from .protocol import FAIL, OKAY

_FEATURE = re.compile(r"^feature:(.*?)(?:=(.*?))?\r?$")
_PACKAGE = re.compile(r"^package:(.*?)\r?$")
_PROPERTY = re.compile(r"^\[([\s\S]*?)\]: \[([\s\S]*?)\]\r?$")
_CLEAR_RESULT = re.compile(r"^(Success|Failed)$")
_INSTALL_RESULT = re.compile(r"^(Success|Failure \[(.*?)\])$")

_CHUNK = 1024

_COMPAT_ESCAPES = str.maketrans(
    {ch: "\\" + ch for ch in " ()[]&|;<>$`\"'"}
)


@dataclass(frozen=True)
class Reverse:
    """One reverse port forwarding rule: device socket to host socket."""

    remote: str
    local: str


class InstallError(AdbError):
    """The package manager refused to install an APK."""

    def __init__(self, apk: str, code: str):
        super().__init__(f"{apk} could not be installed [{code}]")
        self.apk = apk
        self.code = code


def escape_compat(path: str) -> str:
    """Backslash-escape shell metacharacters in ``path``."""
    return path.translate(_COMPAT_ESCAPES)


class _TransportCommand(Command):
    def _check(self, reply: str, prefix: str = "") -> None:
        if reply == OKAY:
            return
        if reply == FAIL:
            message = self._read_value()
            raise AdbError(f"{prefix}: {message}" if prefix else message)
        raise AdbError(f"unexpected response: {reply}, expected OKAY or FAIL")


class GetFeaturesCommand(_TransportCommand):
    """List the device's features; a feature without a value maps to True."""

    def execute(self) -> dict[str, str | bool]:
        self._send("shell:pm list features 2>/dev/null")
        self._check(self._read_reply())
        features: dict[str, str | bool] = {}
        for line in self._read_value().split("\n"):
            match = _FEATURE.match(line)
            if match is None:
                continue
            name, value = match.group(1), match.group(2)
            features[name] = value if value else True
        return features


class GetPackagesCommand(_TransportCommand):
    """List the installed package names."""

    def execute(self) -> list[str]:
        self._send("shell:pm list packages 2>/dev/null")
        self._check(self._read_reply())
        packages = []
        for line in self._read_value().split("\n"):
            line = line.strip()
            if not line:
                continue
            match = _PACKAGE.match(line)
            if match is None:
                continue
            name = match.group(1).strip()
            if name:
                packages.append(name)
        return packages


class GetPropertiesCommand(_TransportCommand):
    """Read the device's system properties."""

    def execute(self) -> dict[str, str]:
        self._send("shell:getprop")
        self._check(self._read_reply())
        properties = {}
        for line in self._read_value().split("\n"):
            line = line.strip()
            if not line:
                continue
            match = _PROPERTY.match(line)
            if match is not None:
                properties[match.group(1).strip()] = match.group(2).strip()
        return properties


class ListReversesCommand(_TransportCommand):
    """List the reverse port forwarding rules of the device."""

    def execute(self) -> list[Reverse]:
        self._send("reverse:list-forward")
        self._check(self._read_reply())
        reverses = []
        for line in self._read_value().strip().split("\n"):
            parts = line.split()
            if len(parts) < 3:
                continue
            reverses.append(Reverse(remote=parts[1], local=parts[2]))
        return reverses


class ClearCommand(_TransportCommand):
    """Clear the data of an installed package."""

    def execute(self, package: str) -> bool:
        self._send(f"shell:pm clear {package}")
        self._check(self._read_reply())
        result = self._search_result()
        if result == "Success":
            return True
        raise AdbError(f"package '{package}' could not be cleared")

    def _search_result(self) -> str:
        buffer = ""
        while True:
            chunk = self._reader(_CHUNK)
            if not chunk:
                raise AdbError("no matching line found")
            buffer += chunk
            for line in buffer.splitlines():
                if _CLEAR_RESULT.match(line):
                    return line


class InstallCommand(_TransportCommand):
    """Install (or replace) an APK already present on the device."""

    def execute(self, apk: str) -> bool:
        self._send(f"shell:pm install -r {escape_compat(apk)}")
        self._check(self._read_reply())
        success, code = self._search_result()
        threading.Thread(target=self._drain, daemon=True).start()
        if success:
            return True
        raise InstallError(apk, code)

    def _search_result(self) -> tuple[bool, str]:
        buffer = ""
        while True:
            try:
                chunk = self._reader(_CHUNK)
            except (EOFError, OSError) as exc:
                raise AdbError(f"failed to read install result: {exc}") from exc
            if not chunk:
                raise AdbError("failed to read install result: stream ended")
            buffer += chunk
            for line in buffer.split("\n"):
                match = _INSTALL_RESULT.match(line.strip())
                if match is None:
                    continue
                if match.group(1) == "Success":
                    return True, ""
                return False, match.group(2)

    def _drain(self) -> None:
        # Consume what is left so the connection closes naturally.
        try:
            while self._reader(_CHUNK):
                pass
        except Exception:
            pass


class UninstallCommand(_TransportCommand):
    """Remove a package; a package that is already gone counts as success."""

    def execute(self, package: str) -> None:
        self._run(f"shell:pm uninstall {package}")

    def execute_with_options(self, package: str, keep_data: bool = False, user: int = -1) -> None:
        request = "shell:pm uninstall"
        if keep_data:
            request += " -k"
        if user >= 0:
            request += f" --user {user}"
        request += f" {package}"
        self._run(request)

    def _run(self, request: str) -> None:
        self._send(request)
        self._check(self._read_reply(), "uninstall failed")
        output = self._read_value().strip()
        if (
            output == "Success"
            or "Failure" in output
            or "Unknown package" in output
        ):
            return
        raise AdbError(f"unexpected uninstall output: {output}")