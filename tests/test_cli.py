import base64
import struct

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from adbkit.auth import parse_public_key
from adbkit.cli import main


@pytest.fixture(scope="module")
def numbers():
    private = rsa.generate_private_key(public_exponent=65537, key_size=1024)
    return private.public_key().public_numbers()


@pytest.fixture
def key_file(tmp_path, numbers):
    words = (numbers.n.bit_length() + 31) // 32
    raw = (
        struct.pack("<II", words, 0)
        + numbers.n.to_bytes(words * 4, "little")
        + bytes(words * 4)
        + struct.pack("<I", numbers.e)
    )
    path = tmp_path / "adbkey.pub"
    path.write_bytes(base64.b64encode(raw) + b"\0tester@example.com\n")
    return path


def test_fingerprint_command(key_file, capsys):
    assert main(["pubkey-fingerprint", str(key_file)]) == 0
    key = parse_public_key(key_file.read_bytes())
    assert capsys.readouterr().out == f"{key.fingerprint} {key.comment}\n"


def test_convert_defaults_to_pem(key_file, numbers, capsys):
    assert main(["pubkey-convert", str(key_file)]) == 0
    out = capsys.readouterr().out
    loaded = serialization.load_pem_public_key(out.encode("ascii"))
    assert loaded.public_numbers().n == numbers.n


def test_convert_openssh(key_file, numbers, capsys):
    assert main(["pubkey-convert", "-f", "openssh", str(key_file)]) == 0
    out = capsys.readouterr().out.strip()
    assert out.endswith(" adbkey")
    loaded = serialization.load_ssh_public_key(out.encode("ascii"))
    assert loaded.public_numbers().n == numbers.n


def test_unsupported_format_fails(key_file, capsys):
    assert main(["pubkey-convert", "--format", "der", str(key_file)]) == 1
    assert "der" in capsys.readouterr().err


def test_invalid_key_fails(tmp_path, capsys):
    path = tmp_path / "broken.pub"
    path.write_bytes(b"!!!")
    assert main(["pubkey-fingerprint", str(path)]) == 1
    assert "failed to parse public key" in capsys.readouterr().err


def test_missing_file_fails(tmp_path):
    assert main(["pubkey-fingerprint", str(tmp_path / "absent.pub")]) == 1


def test_missing_argument_exits():
    with pytest.raises(SystemExit) as info:
        main(["pubkey-convert"])
    assert info.value.code == 2