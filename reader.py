"""
Lispy Tree Reader
Converts the parser's tagged CST into a Value tree
"""

import re
from typing import Dict

from parsing import (
  CSTNode,
  LispyParser,
  NUMBER_TAG, SYMBOL_TAG, SEXPR_TAG, QEXPR_TAG, ROOT_TAG, CHAR_TAG, REGEX_TAG,
)
from values import (
  make_error,
  make_number,
  make_symbol,
  make_sexpr,
  make_qexpr,
  INT_MIN, INT_MAX,
  ERR_INVALID_NUMBER,
)


DELIMITERS = frozenset("(){}")

_INTEGER_PREFIX = re.compile(r'-?[0-9]+')


class LispyReaderError(Exception):
  """The CST contains a node the reader does not understand (grammar/reader mismatch)"""

  def __init__(self, node: CSTNode):
    self.node = node
    location = f" at {node.span}" if node.span else ""
    super().__init__(f"Cannot read node tagged '{node.type}'{location}")


def read_number(node: CSTNode) -> Dict:
  """
  Read the integer prefix of a number literal

  Decimal literals are accepted by the grammar but only their integer
  part is kept: "3.7" reads as 3.
  """
  match = _INTEGER_PREFIX.match(node.value)
  if match is None:
    raise LispyReaderError(node)

  n = int(match.group(0))
  if n < INT_MIN or n > INT_MAX:
    return make_error("invalid number", ERR_INVALID_NUMBER)
  return make_number(n)


def is_structural(node: CSTNode) -> bool:
  """Delimiter tokens and anchor artifacts carry no value"""
  if node.type == REGEX_TAG:
    return True
  return node.type == CHAR_TAG and node.value in DELIMITERS


def read_cst(node: CSTNode) -> Dict:
  """Read a CST node into a value"""
  node_type = node.type

  if node_type == NUMBER_TAG:
    return read_number(node)
  if node_type == SYMBOL_TAG:
    return make_symbol(node.value)

  if node_type in (ROOT_TAG, SEXPR_TAG):
    result = make_sexpr()
  elif node_type == QEXPR_TAG:
    result = make_qexpr()
  else:
    raise LispyReaderError(node)

  for child in node.children:
    if is_structural(child):
      continue
    result['value'].append(read_cst(child))

  return result


def read_line(parser: LispyParser, text: str, filename: str = "<stdin>", line_number: int = 1) -> Dict:
  """Parse one line and read it; syntax errors propagate as LispyParseError"""
  return read_cst(parser.parse_line(text, filename, line_number))
