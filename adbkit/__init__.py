"""Building blocks for the Android Debug Bridge: wire protocol, reply parsing, server and device commands, sync stats, TCP/USB packets and public keys."""

__version__ = "0.1.0"