"""
Deterministic normalization rules.

Everything that decides *what* gets rewritten lives here so the scanner and
the file layer stay policy-free.
"""

from __future__ import annotations

from types import MappingProxyType

TARGET_ENCODING = "utf-8-sig"  # UTF-8 with BOM
LEGACY_ENCODING = "cp1252"  # fallback when no BOM is present
PLACEHOLDER = "?"

DEFAULT_EXTENSIONS = (
    "*.c",
    "*.cc",
    "*.cpp",
    "*.cxx",
    "*.c++",
    "*.h",
    "*.hh",
    "*.hpp",
    "*.hxx",
    "*.h++",
    "*.inl",
    "*.ipp",
    "*.cs",
)

DEFAULT_EXCLUDED_DIRS = frozenset(
    {".git", ".hg", ".svn", ".vs", ".idea", "node_modules", "__pycache__"}
)

CHAR_MAP = MappingProxyType(
    {
        "\u00a9": "(c)",  # copyright
        "\u00ae": "(R)",  # registered
        "\u2122": "(TM)",
        "\u2013": "-",  # en dash
        "\u2014": "-",  # em dash
        "\u2026": "...",
        "\u2018": "'",
        "\u2019": "'",
        "\u201c": '"',
        "\u201d": '"',
        "\u00ab": '"',  # guillemets
        "\u00bb": '"',
        "\u00b7": "*",  # middle dot
        "\u00a0": " ",  # no-break space
    }
)


def map_char(ch: str) -> str:
    """Return the ASCII replacement for a single character."""
    if ord(ch) <= 0x7F:
        return ch
    return CHAR_MAP.get(ch, PLACEHOLDER)
