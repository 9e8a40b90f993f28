from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from swift_reformat.config import FormatConfig
from swift_reformat.exceptions import UnterminatedLiteralError
from swift_reformat.formatter import FormatFileError, format_code, format_file, format_source

TWO_SPACES = FormatConfig(indent_spaces=2)


def _swift(content: str) -> str:
    return textwrap.dedent(content).strip("\n")


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("1+2", "1 + 2"),
        ("x+=1", "x += 1"),
        ("a<=b", "a <= b"),
        ("a&&b", "a && b"),
        ("a!=b", "a != b"),
        ("a===b", "a === b"),
        ("a  =   b", "a = b"),
        ("func f()->Int", "func f() -> Int"),
        ("x<<2", "x << 2"),
        ("a<b", "a < b"),
    ],
)
def test_binary_operators_get_single_spaces(source: str, expected: str):
    assert format_source(source) == expected


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("let x=-1", "let x = -1"),
        ("return -1", "return -1"),
        ("foo(-1)", "foo(-1)"),
        ("let y = 1e-5", "let y = 1e-5"),
        ("-1", "-1"),
        ("a-1", "a - 1"),
        ("a - 1", "a - 1"),
    ],
)
def test_minus_sign_versus_operator(source: str, expected: str):
    assert format_source(source) == expected


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("!flag", "!flag"),
        ("a&b", "a&b"),
        ("~mask", "~mask"),
        ("x^=y", "x ^= y"),
    ],
)
def test_prefix_characters_stay_glued_without_longer_match(source: str, expected: str):
    assert format_source(source) == expected


def test_if_block_is_indented_with_configured_unit():
    assert format_source("if x{\nreturn 1\n}", TWO_SPACES) == "if x {\n  return 1\n}"


def test_default_indent_unit_is_four_spaces():
    assert format_source("if x{\nreturn 1\n}") == "if x {\n    return 1\n}"


def test_tab_indent_unit():
    assert format_source("if x{\nreturn 1\n}", FormatConfig(indent_chars="\t")) == (
        "if x {\n\treturn 1\n}"
    )


def test_nested_blocks_restore_indentation():
    source = "func f() {\nif x {\ny()\n}\n}"

    assert format_source(source, TWO_SPACES) == _swift(
        """
        func f() {
          if x {
            y()
          }
        }
        """
    )


def test_else_is_separated_from_closing_brace():
    source = "if a {\nb()\n}else{\nc()\n}"

    assert format_source(source, TWO_SPACES) == _swift(
        """
        if a {
          b()
        } else {
          c()
        }
        """
    )


def test_else_starting_a_line_gets_extra_level():
    source = "if x {\na()\n}\nelse {\nb()\n}"

    assert format_source(source, TWO_SPACES).split("\n") == [
        "if x {",
        "  a()",
        "}",
        "  else {",
        "  b()",
        "}",
    ]


def test_if_let_continuation_gets_extra_level():
    source = "if let a = b,\nlet c = d {\n}"

    assert format_source(source, TWO_SPACES).split("\n") == [
        "if let a = b,",
        "    let c = d {",
        "}",
    ]


def test_empty_and_inline_braces():
    assert format_source("func f() {}") == "func f() {}"
    assert format_source("foo {return 1}") == "foo { return 1 }"


def test_unterminated_string_fails():
    with pytest.raises(UnterminatedLiteralError) as exc_info:
        format_source('let s="abc')

    assert exc_info.value.kind == "string"
    assert exc_info.value.position == 6


def test_unterminated_block_comment_fails():
    with pytest.raises(UnterminatedLiteralError) as exc_info:
        format_source("x /* oops")

    assert exc_info.value.kind == "block comment"
    assert exc_info.value.position == 2


def test_raw_string_with_unpaired_inner_quote_is_unterminated():
    # "#" delimiters are not recognized, so the inner quote closes the literal
    with pytest.raises(UnterminatedLiteralError) as exc_info:
        format_source('let s = #"a "b"#')

    assert exc_info.value.position == 14


def test_raw_string_with_paired_inner_quotes_passes_through():
    assert format_source('let s = #"say "hi""#') == 'let s = #"say "hi""#'


def test_ternary_is_kept_as_a_unit():
    assert format_source("a ? b : c") == "a ? b : c"
    assert format_source("x = a ? b : c") == "x = a ? b : c"


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("a ?? b", "a ?? b"),
        ("a?.b", "a?.b"),
        ("let x: Int? = nil", "let x: Int? = nil"),
    ],
)
def test_optional_markers(source: str, expected: str):
    assert format_source(source) == expected


def test_lone_closing_brace_is_tolerated():
    result = format_code("}")

    assert result.text == "}"
    assert result.unbalanced_brackets == 1


def test_unbalanced_parenthesis_keeps_following_text():
    result = format_code("a)\nb")

    assert result.text == "a)\nb"
    assert result.unbalanced_brackets == 1


def test_balanced_input_reports_no_imbalance():
    assert format_code("f(a[0]) { }").unbalanced_brackets == 0


def test_ranges_are_atomic():
    assert format_source("for i in 0..<n {}") == "for i in 0..<n {}"
    assert format_source("0...5") == "0...5"


def test_generic_arguments_are_copied_verbatim():
    assert format_source("let a: Array<Int> = []") == "let a: Array<Int> = []"
    assert format_source("Dictionary<String, [Int]>()") == "Dictionary<String, [Int]>()"


def test_glued_comparison_pair_is_copied_as_generic_list():
    assert format_source("if a<b, c>d {\n}") == "if a<b, c>d {\n}"


def test_protocol_composition_in_generic_is_operator_spaced():
    assert format_source("Foo<A & B>") == "Foo < A & B >"


def test_placeholders_are_atomic():
    assert format_source("foo(<#name#>)") == "foo(<#name#>)"


def test_comma_and_colon_spacing():
    assert format_source("f(a ,b)") == "f(a, b)"
    assert format_source("let d = [String:Int]()") == "let d = [String: Int]()"
    assert format_source("a : b") == "a: b"


def test_spaces_inside_parentheses_are_removed():
    assert format_source("f( a )") == "f(a)"


def test_comments_are_copied_verbatim():
    assert format_source("let a=1 // keep  spacing=1") == "let a = 1 // keep  spacing=1"
    assert format_source("/* a+b */x=1") == "/* a+b */x = 1"


def test_multiline_block_comment_keeps_inner_layout():
    source = "/*\n   a+b\n      c\n */\nx=1"

    assert format_source(source) == "/*\n   a+b\n      c\n */\nx = 1"


def test_string_literals_are_copied_verbatim():
    assert format_source('let s = "a+b , c"') == 'let s = "a+b , c"'
    assert format_source('print("\\(a+b) \\("x")")') == 'print("\\(a+b) \\("x")")'


def test_multiline_string_literal():
    source = 'let s = """\n  a+b\n"""\nx=1'

    assert format_source(source) == 'let s = """\n  a+b\n"""\nx = 1'


def test_trailing_operator_continues_line():
    assert format_source("let x = a +\nb") == "let x = a +\n    b"


def test_leading_dot_continues_line():
    assert format_source("foo\n.bar()\n.baz()") == "foo\n    .bar()\n    .baz()"


def test_inline_parenthesis_aligns_continuation_lines():
    assert format_source("foo(a,\nb)") == "foo(a,\n    b)"
    assert format_source("foo(a,\nb)", TWO_SPACES) == "foo(a,\n    b)"


def test_broken_parenthesis_indents_arguments():
    assert format_source("foo(\na,\nb\n)") == "foo(\n    a,\n    b\n)"


def test_broken_array_literal():
    assert format_source("let a = [\n1,\n2\n]") == "let a = [\n    1,\n    2\n]"


def test_trailing_closure_argument():
    assert format_source("foo(a, {\nbar()\n})") == "foo(a, {\n    bar()\n})"


def test_switch_cases_align_with_switch():
    source = "switch x {\ncase 1:\nfoo()\ndefault:\nbreak\n}"

    assert format_source(source) == _swift(
        """
        switch x {
        case 1:
            foo()
        default:
            break
        }
        """
    )


def test_preprocessor_conditionals_indent_their_body():
    source = "#if DEBUG\nlet a=1\n#else\nlet a=2\n#endif"

    assert format_source(source, TWO_SPACES) == _swift(
        """
        #if DEBUG
          let a = 1
        #else
          let a = 2
        #endif
        """
    )


def test_shebang_line_is_copied():
    assert format_source("#!/usr/bin/env swift\nx=1") == "#!/usr/bin/env swift\nx = 1"


def test_column_zero_comment_keeps_its_column():
    source = "func f() {\n// off\nx()\n}"

    assert format_source(source) == "func f() {\n// off\n    x()\n}"


def test_indented_comment_is_reindented():
    source = "func f() {\n  // on\nx()\n}"

    assert format_source(source) == "func f() {\n    // on\n    x()\n}"


def test_blank_lines_survive_without_trailing_whitespace():
    assert format_source("a   \n\n\tb") == "a\n\nb"


def test_output_is_stripped():
    assert format_source("\n\n  let a = 1  \n\n") == "let a = 1"


def test_crlf_line_endings_are_normalized():
    assert format_source("if x{\r\nreturn 1\r\n}", TWO_SPACES) == "if x {\n  return 1\n}"


def test_empty_input():
    result = format_code("")

    assert result.text == ""
    assert result.unbalanced_brackets == 0


@pytest.mark.parametrize(
    "source",
    [
        "if x{\nreturn 1\n}",
        "switch x {\ncase 1:\nfoo()\ndefault:\nbreak\n}",
        "foo(a,\nb)",
        "foo(a, {\nbar()\n})",
        "#if DEBUG\nlet a=1\n#else\nlet a=2\n#endif",
        "let x = a +\nb",
        "func f() {\n// off\nx()\n}",
        "x = a ? b : c",
        "let a = [\n1,\n2\n]",
    ],
)
def test_formatting_is_idempotent(source: str):
    once = format_source(source)

    assert format_source(once) == once


def test_format_file_returns_original_and_result(tmp_path: Path):
    target = tmp_path / "App.swift"
    target.write_text("let x=1\n", encoding="utf-8")

    original, result = format_file(target)

    assert original == "let x=1\n"
    assert result.text == "let x = 1"


def test_format_file_reports_line_of_unterminated_literal(tmp_path: Path):
    target = tmp_path / "Broken.swift"
    target.write_text('let a = 1\r\nlet b = 2\r\nlet s = "oops\r\n', encoding="utf-8")

    with pytest.raises(FormatFileError) as exc_info:
        format_file(target)

    assert "unterminated string at line 3" in str(exc_info.value)


def test_format_file_rejects_invalid_utf8(tmp_path: Path):
    target = tmp_path / "Binary.swift"
    target.write_bytes(b"\xff\xfe\x00")

    with pytest.raises(FormatFileError):
        format_file(target)


def test_format_file_rejects_invalid_config(tmp_path: Path):
    target = tmp_path / "App.swift"
    target.write_text("x\n", encoding="utf-8")

    with pytest.raises(FormatFileError):
        format_file(target, FormatConfig(indent_chars=""))


def test_format_file_missing_file(tmp_path: Path):
    with pytest.raises(FormatFileError):
        format_file(tmp_path / "missing.swift")
