"""
Comment-aware scanner for C-family source text.

Walks the text once, left to right, with one character of lookahead. Only
characters inside `//` and `/* */` comments go through `map_char`; code and
the contents of '...' and "..." literals are copied through untouched.
Unterminated comments or literals at end of input are not an error.
"""

from __future__ import annotations

import enum
from typing import List, NamedTuple

from .rules import map_char


class ScanState(enum.Enum):
    CODE = "code"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING_LITERAL = "string_literal"
    CHAR_LITERAL = "char_literal"


_LITERAL_DELIMITERS = {
    ScanState.STRING_LITERAL: '"',
    ScanState.CHAR_LITERAL: "'",
}


class ScanResult(NamedTuple):
    text: str
    replacements: int
    final_state: ScanState
    # "*" produced by mapping right before "/" closes the block comment on the next pass
    forged_terminators: int = 0

    @property
    def unterminated(self) -> bool:
        # A trailing line comment just means the file has no final newline.
        return self.final_state not in (ScanState.CODE, ScanState.LINE_COMMENT)


def scan_text(text: str) -> ScanResult:
    out: List[str] = []
    replacements = 0
    forged = 0
    state = ScanState.CODE
    escape = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if state is ScanState.CODE:
            if ch == "/" and nxt == "/":
                out.append("//")
                state = ScanState.LINE_COMMENT
                i += 2
                continue
            if ch == "/" and nxt == "*":
                out.append("/*")
                state = ScanState.BLOCK_COMMENT
                i += 2
                continue
            if ch == '"':
                state = ScanState.STRING_LITERAL
            elif ch == "'":
                state = ScanState.CHAR_LITERAL
            out.append(ch)
            i += 1
            continue

        if state is ScanState.LINE_COMMENT:
            if ch == "\n":
                out.append(ch)
                state = ScanState.CODE
            else:
                mapped = map_char(ch)
                replacements += mapped != ch
                out.append(mapped)
            i += 1
            continue

        if state is ScanState.BLOCK_COMMENT:
            if ch == "*" and nxt == "/":
                out.append("*/")
                state = ScanState.CODE
                i += 2
                continue
            mapped = map_char(ch)
            replacements += mapped != ch
            if mapped != ch and mapped.endswith("*") and nxt == "/":
                forged += 1
            out.append(mapped)
            i += 1
            continue

        # string or char literal
        out.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif ch == _LITERAL_DELIMITERS[state]:
            state = ScanState.CODE
        i += 1

    return ScanResult("".join(out), replacements, state, forged)


def scan(text: str) -> str:
    """Return `text` with non-ASCII characters in comments replaced."""
    return scan_text(text).text
