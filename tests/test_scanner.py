import pytest

from comment_ascii.scanner import ScanState, scan, scan_text


def test_line_comment_example():
    assert scan("// caf\u00e9 \u2013 nice") == "// caf? - nice"


def test_string_literal_untouched():
    assert scan('"caf\u00e9"') == '"caf\u00e9"'


def test_block_comment_example():
    assert scan("/* \u00a9 2024 */") == "/* (c) 2024 */"


def test_escaped_quote_in_char_literal():
    result = scan_text("'\\''")
    assert result.text == "'\\''"
    assert result.final_state is ScanState.CODE


def test_escaped_quote_does_not_end_string():
    src = '"say \\"\u201chi\u201d\\" // not a comment \u00a9" // \u00a9\n'
    expected = '"say \\"\u201chi\u201d\\" // not a comment \u00a9" // (c)\n'
    assert scan(src) == expected


def test_escaped_backslash_ends_escape():
    # "\\" is a complete literal; the comment after it is real.
    assert scan('"\\\\" // \u00b7') == '"\\\\" // *'


def test_char_literal_holding_double_quote():
    assert scan("c = '\"'; // \u2026") == "c = '\"'; // ..."


def test_non_ascii_in_code_untouched():
    assert scan("int \u00e9t\u00e9 = 1;") == "int \u00e9t\u00e9 = 1;"


def test_newline_ends_line_comment():
    src = "// \u00e9\nx = '\u00e9';\n"
    assert scan(src) == "// ?\nx = '\u00e9';\n"


def test_crlf_is_preserved():
    assert scan("// \u2014\r\nint x;\r\n") == "// -\r\nint x;\r\n"


def test_block_comment_spans_lines():
    src = "/*\n * \u00ab quoted \u00bb\n */ s = \"\u00ab\";"
    assert scan(src) == '/*\n * " quoted "\n */ s = "\u00ab";'


def test_slash_star_slash_does_not_close():
    assert scan("/*/ \u00e9 */") == "/*/ ? */"


def test_comment_markers_inside_block_comment():
    assert scan("/* // \u00e9 */ x \u00e9") == "/* // ? */ x \u00e9"


def test_quotes_inside_comments_are_not_literals():
    src = "// don't \u2019\nint a; /* \"open */ b \u00e9"
    assert scan(src) == "// don't '\nint a; /* \"open */ b \u00e9"


@pytest.mark.parametrize(
    "src, state",
    [
        ("/* open \u00e9", ScanState.BLOCK_COMMENT),
        ('"open \u00e9', ScanState.STRING_LITERAL),
        ("'x", ScanState.CHAR_LITERAL),
        ("// trailing", ScanState.LINE_COMMENT),
        ("int x;", ScanState.CODE),
        ("", ScanState.CODE),
    ],
)
def test_end_of_input_in_any_state(src, state):
    result = scan_text(src)
    assert result.final_state is state
    assert result.unterminated is (state not in (ScanState.CODE, ScanState.LINE_COMMENT))


def test_unterminated_block_comment_still_mapped():
    assert scan("/* \u2122") == "/* (TM)"


def test_lone_slash_at_end():
    assert scan("a /") == "a /"


def test_replacement_count():
    result = scan_text("// \u00e9\u00e9 ok\n/* \u00a9 */ \"\u00e9\"")
    assert result.replacements == 3


def test_ascii_input_is_unchanged():
    src = "#include <stdio.h>\n/* c */ int main() { puts(\"//\"); return '\\0'; } // end\n"
    result = scan_text(src)
    assert result.text == src
    assert result.replacements == 0


@pytest.mark.parametrize(
    "src",
    [
        "// caf\u00e9 \u2013 nice\n",
        "/* \u00a9 \u00ae \u2122 \u2026 */ x = \"\u00e9\";",
        "'\\'' /* \u00b7 */ '\u00e9'",
        "/* unterminated \u201cquote",
        "\"open string // \u00e9",
    ],
)
def test_idempotent(src):
    once = scan(src)
    assert scan(once) == once


def test_delimiters_survive_mapping():
    src = "/*\u00b7*/ //\u00b7\n"
    out = scan(src)
    assert out == "/***/ //*\n"
    assert out.startswith("/*")
    assert "*/" in out


def test_middle_dot_before_slash_is_flagged():
    src = '/* ·/ // */ s = "é";\n'
    result = scan_text(src)
    # the mapping stays exact even though it closes the comment on a rescan
    assert result.text == '/* */ // */ s = "é";\n'
    assert result.forged_terminators == 1


def test_no_forged_terminator_for_plain_comments():
    assert scan_text("/* · / ·*/ // ·/\n").forged_terminators == 0
