"""Generating a key code module from the Android KeyEvent.java source."""

from __future__ import annotations

import argparse
import re
import sys
import urllib.error
import urllib.request
from datetime import datetime, timezone
from pathlib import Path

_KEYCODE = re.compile(r"public static final int (KEYCODE_[^\s]+)\s*=\s*([0-9]+);")
_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def extract_keycodes(text: str) -> list[tuple[str, int]]:
    """Return (name, value) for every KEYCODE constant in Java source, in order."""
    return [(name, int(value)) for name, value in _KEYCODE.findall(text)]


def _format_date(date: datetime) -> str:
    if date.tzinfo is not None:
        date = date.astimezone(timezone.utc)
    return (
        f"{_DAYS[date.weekday()]}, {date.day:02d} {_MONTHS[date.month - 1]} "
        f"{date.year} {date.hour:02d}:{date.minute:02d}:{date.second:02d} UTC"
    )


def render_keycodes(keycodes, date: datetime) -> str:
    """Render key codes as a Python module of constants."""
    lines = [f"# Generated by adbkit.keycode_task on {_format_date(date)}", ""]
    lines.extend(f"{name} = {value}" for name, value in keycodes)
    return "\n".join(lines) + "\n"


def fetch_source(url: str) -> str:
    """Download the KeyEvent.java source."""
    try:
        with urllib.request.urlopen(url) as response:
            status = getattr(response, "status", None)
            if status is not None and status != 200:
                raise RuntimeError(f"unable to retrieve KeyEvent.java (HTTP {status})")
            body = response.read()
    except urllib.error.HTTPError as exc:
        raise RuntimeError(f"unable to retrieve KeyEvent.java (HTTP {exc.code})") from exc
    except (urllib.error.URLError, OSError) as exc:
        raise RuntimeError(f"unable to retrieve KeyEvent.java: {exc}") from exc
    return body.decode("utf-8", errors="replace")


def generate(dest_file, url: str) -> list[tuple[str, int]]:
    """Fetch the source, write the generated module to ``dest_file`` and return the codes."""
    keycodes = extract_keycodes(fetch_source(url))
    content = render_keycodes(keycodes, datetime.now(timezone.utc))
    try:
        Path(dest_file).write_text(content, encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"failed to write output file: {exc}") from exc
    return keycodes


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="adbkit-keycodes",
        description="Extract Android key codes from KeyEvent.java.",
    )
    parser.add_argument("--url", required=True, help="location of KeyEvent.java")
    parser.add_argument(
        "dest", nargs="?", help="module file to write; without it codes are listed"
    )
    args = parser.parse_args(argv)

    try:
        if args.dest:
            generate(args.dest, args.url)
            print(f"File {args.dest} created successfully")
        else:
            for name, value in extract_keycodes(fetch_source(args.url)):
                print(f"{name}: {value}")
    except RuntimeError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())