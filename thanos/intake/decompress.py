"""
Chunk payload decompressor.

Provides a single entry point `decompress_payload(tag, body)` that returns the
fully decompressed bytes of one stored chunk, regardless of which of the two
supported schemes it was written with:

- tag 1: gzip (RFC 1952)
- tag 2: zlib (RFC 1950)

Both are decoded to the end of the stream; no declared length is trusted.
Any other tag (uncompressed, LZ4, externally stored chunks, ...) is reported
as UnsupportedCompressionScheme so the caller can skip just that chunk.
"""

from __future__ import annotations

import zlib
from typing import Final

from ..errors import DecompressionFailure, UnsupportedCompressionScheme

COMPRESSION_GZIP: Final[int] = 1
COMPRESSION_ZLIB: Final[int] = 2

SUPPORTED_SCHEMES: Final[tuple[int, ...]] = (COMPRESSION_GZIP, COMPRESSION_ZLIB)

GZIP_WBITS: Final[int] = 16 + zlib.MAX_WBITS


def decompress_payload(tag: int, body: bytes) -> bytes:
    """
    Decompress `body` according to its compression `tag`.

    Raises
    ------
    UnsupportedCompressionScheme
        `tag` is neither gzip nor zlib.
    DecompressionFailure
        The stream is corrupt or ends before its end-of-stream marker.
    """
    if tag == COMPRESSION_GZIP:
        # first member only; bytes after it are ignored, as zlib.decompress does
        decoder = zlib.decompressobj(wbits=GZIP_WBITS)
        try:
            data = decoder.decompress(body) + decoder.flush()
        except zlib.error as exc:
            raise DecompressionFailure(str(exc)) from exc
        if not decoder.eof:
            raise DecompressionFailure("gzip stream ended before its trailer")
        return data

    if tag == COMPRESSION_ZLIB:
        try:
            return zlib.decompress(body)
        except zlib.error as exc:
            raise DecompressionFailure(str(exc)) from exc

    raise UnsupportedCompressionScheme(tag)
