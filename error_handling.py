"""
Enhanced error handling for the Lispy parser with detailed error messages
Pure functional style - the exception class wraps an immutable error dict
"""

from typing import List, Optional, Dict
from pyparsing import ParseException
import re


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_parse_error(
    message: str,
    location: int,
    line: int,
    column: int,
    filename: str = "<stdin>",
    expected: Optional[List[str]] = None,
    got: Optional[str] = None,
    context: Optional[str] = None,
    suggestions: Optional[List[str]] = None
) -> Dict:
    """Create an immutable parse error structure"""
    return {
        'message': message,
        'location': location,
        'line': line,
        'column': column,
        'filename': filename,
        'expected': expected or [],
        'got': got,
        'context': context,
        'suggestions': suggestions or []
    }


def format_parse_error(error: Dict) -> str:
    """Format parse error as string"""
    error_msg = f"{error['filename']}:{error['line']}:{error['column']}: error: {error['message']}\n"

    if error['expected']:
        error_msg += f"  Expected: {', '.join(error['expected'])}\n"

    if error['got']:
        error_msg += f"  Got: {error['got']}\n"

    if error['context']:
        error_msg += f"{error['context']}\n"

    if error['suggestions']:
        error_msg += "  Suggestions:\n"
        for suggestion in error['suggestions']:
            error_msg += f"    - {suggestion}\n"

    return error_msg.rstrip('\n')


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_line(source_text: str, line_num: int, col_num: int, line_offset: int = 0) -> str:
    """Render the offending line with a caret under the error column"""
    lines = source_text.split('\n')
    line = lines[line_num - 1] if 0 < line_num <= len(lines) else ""
    caret = f"{'':6}{' ' * (col_num - 1)}^ Error here"
    return f"{line_num + line_offset:4d}: {line}\n{caret}"


def extract_expected(exc: ParseException) -> List[str]:
    """Extract expected tokens from exception"""
    # pyparsing doesn't always have a usable .expected attribute, the message does
    expected_match = re.search(r"Expected\s+(.+?)(?:,\s+found|\s+\(|$)", str(exc))
    if expected_match:
        return [expected_match.group(1)]
    return ["valid syntax"]


def extract_got(source_text: str, line_num: int, col_num: int) -> str:
    """Extract what was actually found at the error location"""
    lines = source_text.split('\n')

    if line_num <= len(lines):
        error_line = lines[line_num - 1]
        if col_num <= len(error_line):
            start = max(0, col_num - 1)
            end = min(len(error_line), col_num + 10)
            got_text = error_line[start:end].strip()
            if got_text:
                return f"'{got_text}'"
        return "end of input"
    return "unknown"


def count_unbalanced(source_text: str, open_char: str, close_char: str) -> int:
    """Net count of unclosed delimiters; negative when there are extra closers"""
    return source_text.count(open_char) - source_text.count(close_char)


def generate_suggestions(source_text: str, got: str) -> List[str]:
    """Generate helpful suggestions based on the error"""
    suggestions = []

    parens = count_unbalanced(source_text, '(', ')')
    if parens > 0:
        suggestions.append(f"{parens} '(' left unclosed - add ')' to finish the S-Expression")
    elif parens < 0:
        suggestions.append(f"{-parens} extra ')' without a matching '('")

    braces = count_unbalanced(source_text, '{', '}')
    if braces > 0:
        suggestions.append(f"{braces} '{{' left unclosed - add '}}' to finish the Q-Expression")
    elif braces < 0:
        suggestions.append(f"{-braces} extra '}}' without a matching '{{'")

    if any(c in got for c in '"\'[];,'):
        suggestions.append("Only numbers, symbols, (...) and {...} are valid expressions")

    return suggestions


def enhance_parse_exception_dict(exc: ParseException, source_text: str,
                                 filename: str = "<stdin>", line_offset: int = 0) -> Dict:
    """Convert pyparsing exception to enhanced Lispy error dict"""
    line_num = exc.lineno
    col_num = exc.column

    context = get_context_line(source_text, line_num, col_num, line_offset)
    expected = extract_expected(exc)
    got = extract_got(source_text, line_num, col_num)
    suggestions = generate_suggestions(source_text, got)

    return make_parse_error(
        message=exc.msg,
        location=exc.loc,
        line=line_num + line_offset,
        column=col_num,
        filename=filename,
        expected=expected,
        got=got,
        context=context,
        suggestions=suggestions
    )


# ============================================================================
# EXCEPTION CLASS
# ============================================================================

class LispyParseError(Exception):
    """Syntax error reported by the parser; never becomes a language-level Error value"""

    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 filename: str = "<stdin>", expected: Optional[List[str]] = None,
                 got: Optional[str] = None, context: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        self.message = message
        self.location = location
        self.line = line
        self.column = column
        self.filename = filename
        self.expected = expected or []
        self.got = got
        self.context = context
        self.suggestions = suggestions or []
        super().__init__(message)

    @classmethod
    def from_dict(cls, error: Dict) -> "LispyParseError":
        return cls(**error)

    def to_dict(self) -> Dict:
        return make_parse_error(
            self.message, self.location, self.line, self.column, self.filename,
            self.expected, self.got, self.context, self.suggestions
        )

    def __str__(self) -> str:
        return format_parse_error(self.to_dict())


def enhance_parse_exception(exc: ParseException, source_text: str,
                            filename: str = "<stdin>", line_offset: int = 0) -> LispyParseError:
    """Convert pyparsing exception to enhanced Lispy error"""
    return LispyParseError.from_dict(
        enhance_parse_exception_dict(exc, source_text, filename, line_offset)
    )
