"""
Lispy Parser
pyparsing grammar producing a tagged concrete syntax tree with source spans
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

from pyparsing import (
    Forward, Literal, Regex, ZeroOrMore, ParseException, ParserElement,
    lineno, col,
)

from error_handling import LispyParseError, enhance_parse_exception

# Enable packrat parsing for performance
ParserElement.enable_packrat()


# Node tags. ROOT_TAG marks the top of a parsed line; CHAR_TAG and REGEX_TAG
# are structural artifacts (delimiters and start/end anchors) the reader skips.
NUMBER_TAG = "number"
SYMBOL_TAG = "symbol"
SEXPR_TAG = "sexpr"
QEXPR_TAG = "qexpr"
ROOT_TAG = ">"
CHAR_TAG = "char"
REGEX_TAG = "regex"

NUMBER_PATTERN = r'-?[0-9]+(\.[0-9]+)?'
SYMBOL_PATTERN = r'[a-zA-Z0-9_+\-*/\\=<>!&^%]+'


@dataclass(frozen=True)
class SourceSpan:
    """Source location information for preserving CST"""
    filename: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    text: str = ""

    def __str__(self) -> str:
        if self.start_line == self.end_line:
            return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_col}"
        return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


@dataclass(frozen=True)
class CSTNode:
    """Concrete Syntax Tree node; leaves carry text in value, branches carry children"""
    type: str
    value: Any
    children: List['CSTNode'] = field(default_factory=list)
    span: Optional[SourceSpan] = None

    def __str__(self) -> str:
        if self.children:
            children_str = ", ".join(str(child) for child in self.children)
            return f"{self.type}([{children_str}])"
        return f"{self.type}({self.value})"


class LispyGrammar:
    """Lispy grammar definition using pyparsing

        number : /-?[0-9]+(\\.[0-9]+)?/
        symbol : /[a-zA-Z0-9_+\\-*\\/\\\\=<>!&^%]+/
        sexpr  : '(' <expr>* ')'
        qexpr  : '{' <expr>* '}'
        expr   : <number> | <symbol> | <sexpr> | <qexpr>
        lispy  : /^/ <expr>* /$/
    """

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._filename = "<stdin>"
        self._line_offset = 0
        self._setup_grammar()

    def _setup_grammar(self):
        """Setup the grammar; every element builds CSTNodes through parse actions"""

        expr = Forward()

        number = Regex(NUMBER_PATTERN).set_name("number")
        number.set_parse_action(self._leaf_action(NUMBER_TAG))

        symbol = Regex(SYMBOL_PATTERN).set_name("symbol")
        symbol.set_parse_action(self._leaf_action(SYMBOL_TAG))

        def delimiter(char: str) -> ParserElement:
            return Literal(char).set_parse_action(self._leaf_action(CHAR_TAG))

        sexpr = (delimiter("(") + ZeroOrMore(expr) + delimiter(")")).set_name("sexpr")
        sexpr.set_parse_action(self._branch_action(SEXPR_TAG))

        qexpr = (delimiter("{") + ZeroOrMore(expr) + delimiter("}")).set_name("qexpr")
        qexpr.set_parse_action(self._branch_action(QEXPR_TAG))

        # Number before symbol: a digit run is a number even though symbols may contain digits
        expr <<= number | symbol | sexpr | qexpr

        self.number = number
        self.symbol = symbol
        self.sexpr = sexpr
        self.qexpr = qexpr
        self.expression = expr
        self.program = ZeroOrMore(expr)

    def _span(self, source: str, start: int, end: int) -> SourceSpan:
        return SourceSpan(
            self._filename,
            lineno(start, source) + self._line_offset,
            col(start, source),
            lineno(end, source) + self._line_offset,
            col(end, source),
            source[start:end]
        )

    def _leaf_action(self, tag: str):
        def action(source: str, loc: int, tokens) -> CSTNode:
            text = tokens[0]
            return CSTNode(tag, text, [], self._span(source, loc, loc + len(text)))
        return action

    def _branch_action(self, tag: str):
        def action(source: str, loc: int, tokens) -> CSTNode:
            children = list(tokens)
            opening, closing = children[0].span, children[-1].span
            span = SourceSpan(
                self._filename,
                opening.start_line,
                opening.start_col,
                closing.end_line,
                closing.end_col
            )
            return CSTNode(tag, None, children, span)
        return action

    def parse_line(self, text: str, filename: str = "<stdin>", line_number: int = 1) -> CSTNode:
        """Parse one line of input into a root node framed by start/end anchors"""
        self._filename = filename
        self._line_offset = line_number - 1
        try:
            result = self.program.parse_string(text, parse_all=True)
        except ParseException as e:
            raise enhance_parse_exception(e, text, filename, self._line_offset) from e

        start = CSTNode(REGEX_TAG, "", [], self._span(text, 0, 0))
        end = CSTNode(REGEX_TAG, "", [], self._span(text, len(text), len(text)))
        root = CSTNode(ROOT_TAG, None, [start] + list(result) + [end], SourceSpan(
            filename, line_number, 1, line_number, len(text) + 1, text
        ))

        if self.debug:
            print(pretty_print_cst(root), end="")

        return root


class LispyParser:
    """Main Lispy parser; each line of input is one top-level program"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = LispyGrammar(debug)

    def parse_file(self, filepath: str) -> List[CSTNode]:
        """Parse a Lispy source file, one root node per non-blank line"""
        with open(filepath, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.parse_string(content, filepath)

    def parse_string(self, text: str, filename: str = "<input>") -> List[CSTNode]:
        """Parse multi-line source; blank lines are skipped"""
        return [
            self.grammar.parse_line(line, filename, line_number)
            for line_number, line in enumerate(text.split('\n'), 1)
            if line.strip()
        ]

    def parse_line(self, text: str, filename: str = "<stdin>", line_number: int = 1) -> CSTNode:
        return self.grammar.parse_line(text, filename, line_number)


# Factory function for creating parsers
def create_parser(debug: bool = False) -> LispyParser:
    """Create a Lispy parser"""
    return LispyParser(debug=debug)


# Utility functions for working with CST
def find_nodes_by_type(cst: CSTNode, node_type: str) -> List[CSTNode]:
    """Find all nodes of a specific type in CST"""
    result = []

    def search(node: CSTNode):
        if node.type == node_type:
            result.append(node)
        for child in node.children:
            search(child)

    search(cst)
    return result


def pretty_print_cst(cst: CSTNode, indent: int = 0) -> str:
    """Pretty print a CST node for debugging"""
    result = "  " * indent + f"{cst.type}"
    if cst.value is not None:
        result += f"({repr(cst.value)})"
    result += "\n"

    for child in cst.children:
        result += pretty_print_cst(child, indent + 1)

    return result


def cst_to_dict(cst: CSTNode) -> Dict[str, Any]:
    """Convert CST to dictionary representation"""
    return {
        "type": cst.type,
        "value": cst.value,
        "span": {
            "filename": cst.span.filename,
            "start_line": cst.span.start_line,
            "start_col": cst.span.start_col,
            "end_line": cst.span.end_line,
            "end_col": cst.span.end_col,
        } if cst.span else None,
        "children": [cst_to_dict(child) for child in cst.children]
    }
