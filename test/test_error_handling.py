"""
Tests for syntax error diagnostics
"""

import pytest
from error_handling import (
  LispyParseError, get_context_line, generate_suggestions, extract_got, format_parse_error,
  make_parse_error,
)


class TestContextLine:
  """The offending line is shown once, with a caret under the column"""

  def test_caret_under_column(self):
    assert get_context_line("(+ 1 2", 1, 3) == "   1: (+ 1 2\n        ^ Error here"

  def test_line_offset_is_displayed(self):
    assert get_context_line("x)", 1, 2, line_offset=6).splitlines()[0] == "   7: x)"

  def test_from_parser(self, parser):
    with pytest.raises(LispyParseError) as exc_info:
      parser.parse_line("{1 2", "prog.lspy", 4)
    context = exc_info.value.context.splitlines()
    assert len(context) == 2
    assert context[0] == "   4: {1 2"
    assert context[1].endswith("^ Error here")


class TestSuggestions:

  def test_unbalanced_brackets(self):
    assert generate_suggestions("(+ 1 {2", "end of input") == [
        "1 '(' left unclosed - add ')' to finish the S-Expression",
        "1 '{' left unclosed - add '}' to finish the Q-Expression",
    ]

  def test_extra_closer(self):
    assert generate_suggestions("(x))", "')'") == ["1 extra ')' without a matching '('"]

  def test_foreign_syntax(self):
    assert generate_suggestions("\"hi\"", "'\"hi\"'") == [
        "Only numbers, symbols, (...) and {...} are valid expressions"
    ]

  def test_got_at_end_of_line(self):
    assert extract_got("(+ 1", 1, 5) == "end of input"
    assert extract_got("(+ 1 ]", 1, 6) == "']'"


class TestFormatting:

  def test_format(self):
    error = make_parse_error(
        "Expected end of text", 0, 2, 1, "f.lspy",
        expected=["end of text"], got="')'", context=None, suggestions=["fix it"]
    )
    assert format_parse_error(error) == (
        "f.lspy:2:1: error: Expected end of text\n"
        "  Expected: end of text\n"
        "  Got: ')'\n"
        "  Suggestions:\n"
        "    - fix it"
    )

  def test_round_trip_through_exception(self):
    error = make_parse_error("bad", 3, 1, 4)
    assert LispyParseError.from_dict(error).to_dict() == error
