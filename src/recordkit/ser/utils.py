from __future__ import annotations

"""Helpers for turning byte buffers into JSON text."""

import codecs
import typing as t

# longest marks first so UTF-32 LE is not mistaken for UTF-16 LE
_BYTE_ORDER_MARKS: t.Tuple[t.Tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, 'utf-32'),
    (codecs.BOM_UTF32_BE, 'utf-32'),
    (codecs.BOM_UTF8, 'utf-8-sig'),
    (codecs.BOM_UTF16_LE, 'utf-16'),
    (codecs.BOM_UTF16_BE, 'utf-16'),
)

# which of the first four bytes are NUL, keyed as a bit pattern
_NUL_PATTERNS: t.Dict[str, str] = {
    '0000': 'utf-8',
    '1010': 'utf-16-be',
    '0101': 'utf-16-le',
    '1110': 'utf-32-be',
    '0111': 'utf-32-le',
}


def guess_json_utf(data: bytes) -> t.Optional[str]:
    """Guess the UTF encoding of a JSON document.

    A document opens with two ASCII characters, so without a byte order mark
    the placement of NUL bytes in the first four bytes gives away the
    encoding. Returns ``None`` when the prefix fits no known layout.
    """

    head = bytes(data[:4])
    for mark, encoding in _BYTE_ORDER_MARKS:
        if head.startswith(mark):
            return encoding
    pattern = ''.join('1' if byte == 0 else '0' for byte in head.ljust(4, b' '))
    return _NUL_PATTERNS.get(pattern)
