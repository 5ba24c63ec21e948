"""
Encoding detection and UTF-8+BOM persistence.

Detection is by byte-order mark only unless `sniff` is requested, in which
case BOM-less input is handed to charset-normalizer for a best guess.
"""

from __future__ import annotations

import codecs
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Tuple

from charset_normalizer import from_bytes

from .rules import LEGACY_ENCODING, TARGET_ENCODING

_logger = logging.getLogger(__name__)

_BOMS = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)

_LEGACY_ERRORS = "comment-ascii-latin1-passthrough"


def _latin1_passthrough(exc: UnicodeError):
    # cp1252 leaves 0x81, 0x8D, 0x8F, 0x90 and 0x9D undefined; keep them as
    # the C1 control with the same value so the legacy decode never fails.
    if not isinstance(exc, UnicodeDecodeError):
        raise exc
    undecoded = exc.object[exc.start:exc.end]
    return "".join(chr(b) for b in undecoded), exc.end


codecs.register_error(_LEGACY_ERRORS, _latin1_passthrough)


def decode_source(raw: bytes, sniff: bool = False) -> Tuple[str, str]:
    """
    Decode raw file bytes to text.

    Returns (text, encoding_name). A recognised BOM is stripped from the
    text. Malformed UTF-8/UTF-16 raises UnicodeDecodeError.
    """
    for bom, encoding in _BOMS:
        if raw.startswith(bom):
            return raw[len(bom):].decode(encoding), encoding

    if sniff and raw:
        match = from_bytes(raw).best()
        if match is not None:
            _logger.debug("charset-normalizer guessed %s", match.encoding)
            return str(match), match.encoding

    return raw.decode(LEGACY_ENCODING, errors=_LEGACY_ERRORS), LEGACY_ENCODING


def encode_utf8_bom(text: str) -> bytes:
    return text.encode(TARGET_ENCODING)


def write_utf8_bom(path: Path, text: str) -> None:
    """Overwrite `path` with `text` as UTF-8 prefixed by a BOM."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = encode_utf8_bom(text)

    # A failed write must never leave a truncated source; swap in a sibling.
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        if path.exists():
            os.chmod(tmp, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise
