"""
File-level normalization.

Responsibilities:
- read each candidate file once
- decode it (BOM sniffing, legacy code page fallback)
- run the comment-aware scanner
- rewrite as UTF-8 with BOM only when the scanner changed something
- keep going when a single file fails
- build the response envelope for a single uploaded file
"""

from __future__ import annotations

import base64
import fnmatch
import hashlib
import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .encoding import decode_source, encode_utf8_bom, write_utf8_bom
from .models import FileResult, RunSummary
from .rules import DEFAULT_EXCLUDED_DIRS, DEFAULT_EXTENSIONS, TARGET_ENCODING
from .scanner import scan_text

_logger = logging.getLogger(__name__)


def process_file(path, dry_run: bool = False, sniff_encoding: bool = False) -> FileResult:
    """
    Normalize comments in one file.

    I/O and decode errors are logged and reported on the result instead of
    being raised, so a caller can move on to the next file.
    """
    path = Path(path)
    result = FileResult(path=str(path))

    try:
        with path.open("rb") as fh:
            raw = fh.read()

        text, encoding = decode_source(raw, sniff=sniff_encoding)
        result.encoding = encoding
        scanned = scan_text(text)

        if scanned.unterminated:
            result.unterminated = scanned.final_state.value
            _logger.warning(
                "%s: input ends inside %s", path, scanned.final_state.value.replace("_", " ")
            )

        if scanned.forged_terminators:
            result.forged_terminators = scanned.forged_terminators
            _logger.warning(
                "%s: %d mapped character(s) now close a block comment early",
                path,
                scanned.forged_terminators,
            )

        if scanned.text != text:
            result.changed = True
            result.replacements = scanned.replacements
            if dry_run:
                _logger.info("%s: would rewrite (%d replacements)", path, scanned.replacements)
            else:
                write_utf8_bom(path, scanned.text)
                _logger.info("%s: rewritten (%d replacements)", path, scanned.replacements)
        else:
            _logger.debug("%s: unchanged", path)
    except (OSError, UnicodeError) as e:
        _logger.warning("%s: skipped: %s", path, e)
        result.changed = False
        result.replacements = 0
        result.error = f"{type(e).__name__}: {e}"

    return result


def normalize_path(path) -> bool:
    """Normalize one file in place; return True if it was rewritten."""
    return process_file(path).changed


def matches_extension(name: str, patterns: Iterable[str]) -> bool:
    lowered = name.lower()
    return any(fnmatch.fnmatchcase(lowered, p.lower()) for p in patterns)


def iter_source_files(
    root,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
) -> Iterator[Path]:
    """Yield files under `root` matching any extension pattern, in sorted order."""
    patterns = tuple(extensions)
    excluded = set(exclude_dirs)

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for name in sorted(filenames):
            if matches_extension(name, patterns):
                yield Path(dirpath) / name


def normalize_tree(
    root,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude_dirs: Optional[Iterable[str]] = None,
    dry_run: bool = False,
    sniff_encoding: bool = False,
) -> RunSummary:
    """
    Normalize every matching file under `root`.

    Raises NotADirectoryError before touching any file if `root` is not an
    existing directory.
    """
    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(f"Root directory does not exist: {root}")

    excluded = set(DEFAULT_EXCLUDED_DIRS)
    if exclude_dirs:
        excluded.update(exclude_dirs)

    summary = RunSummary(root=str(root), dry_run=dry_run)
    for path in iter_source_files(root, extensions, excluded):
        summary.add(process_file(path, dry_run=dry_run, sniff_encoding=sniff_encoding))

    _logger.info(
        "examined %d files, changed %d, failed %d",
        summary.examined,
        summary.changed,
        summary.failed,
    )
    return summary


def normalize_source_bytes(filename: str, raw: bytes, sniff_encoding: bool = False) -> dict:
    """
    Run one uploaded file through decode + scan.

    The returned content is UTF-8 with BOM when something changed, otherwise
    the upload's original bytes.
    """
    text, detected = decode_source(raw, sniff=sniff_encoding)
    scanned = scan_text(text)
    changed = scanned.text != text

    out = encode_utf8_bom(scanned.text) if changed else raw
    return {
        "normalized_source": {
            "filename": filename,
            "sha256": hashlib.sha256(out).hexdigest(),
            "encoding": TARGET_ENCODING if changed else detected,
            "content_b64": base64.b64encode(out).decode("ascii"),
        },
        "report": {
            "detected_encoding": detected,
            "changed": changed,
            "replacements": scanned.replacements,
            "unterminated": scanned.final_state.value if scanned.unterminated else None,
            "forged_terminators": scanned.forged_terminators,
        },
    }
