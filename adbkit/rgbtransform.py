"""Conversion of raw framebuffer pixels to packed RGB."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Meta:
    """Pixel layout: bits per pixel and bit offsets of each colour."""

    bpp: int
    red_offset: int
    green_offset: int
    blue_offset: int
    alpha_offset: int = 0


class RgbTransform:
    """Turns 24- or 32-bit raw pixels into three bytes R, G, B per pixel.

    Bytes of an incomplete trailing pixel are kept until the next call.
    """

    def __init__(self, meta: Meta):
        if meta.bpp not in (24, 32):
            raise ValueError(
                "only 24 and 32 bits per pixel raw images are supported "
                "(8 bits per colour)"
            )
        self.meta = meta
        self._pixel_bytes = meta.bpp // 8
        self._positions = (
            meta.red_offset // 8,
            meta.green_offset // 8,
            meta.blue_offset // 8,
        )
        if any(not 0 <= pos < self._pixel_bytes for pos in self._positions):
            raise ValueError("colour offset lies outside the pixel")
        self._buffer = bytearray()

    def transform(self, data: bytes) -> bytes:
        """Convert as many whole pixels as are available."""
        self._buffer += data
        count = len(self._buffer) // self._pixel_bytes
        used = count * self._pixel_bytes
        out = bytearray(count * 3)
        for channel, pos in enumerate(self._positions):
            out[channel::3] = self._buffer[pos:used:self._pixel_bytes]
        del self._buffer[:used]
        return bytes(out)