"""
Lispy Value Model
Tagged runtime values built from plain dictionaries
Every value is {'type': <tag>, 'value': <payload>} plus per-case extras
"""

from typing import Any, Callable, Dict, List


# ============================================================================
# TYPE TAGS
# ============================================================================

NUMBER = "Number"
ERROR = "Error"
SYMBOL = "Symbol"
FUNCTION = "Function"
SEXPR = "S-Expression"
QEXPR = "Q-Expression"

VALUE_TYPES = (NUMBER, ERROR, SYMBOL, FUNCTION, SEXPR, QEXPR)


# Error kinds carried alongside the message of an Error value
ERR_UNBOUND_SYMBOL = "UnboundSymbol"
ERR_TYPE_MISMATCH = "TypeMismatch"
ERR_ARITY_MISMATCH = "ArityMismatch"
ERR_DIVISION_BY_ZERO = "DivisionByZero"
ERR_INVALID_EXPONENT = "InvalidExponent"
ERR_EMPTY_LIST = "EmptyListOperation"
ERR_NOT_A_FUNCTION = "NotAFunction"
ERR_PROTECTED_NAME = "ProtectedNameRedefinition"
ERR_INVALID_NUMBER = "InvalidNumber"
ERR_INVALID_INPUT = "InvalidInput"


# ============================================================================
# FIXED-WIDTH INTEGERS
# ============================================================================

INT_BITS = 64
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1
_INT_MOD = 1 << INT_BITS


def wrap_int(n: int) -> int:
  """Wrap an unbounded Python int into the signed 64-bit range"""
  n &= _INT_MOD - 1
  return n - _INT_MOD if n > INT_MAX else n


def int_div(x: int, y: int) -> int:
  """Integer division truncating toward zero"""
  q = abs(x) // abs(y)
  if (x < 0) != (y < 0):
    q = -q
  return wrap_int(q)


def int_mod(x: int, y: int) -> int:
  """Remainder whose sign follows the dividend, paired with int_div"""
  return wrap_int(x - y * int_div(x, y))


def int_pow(base: int, exponent: int) -> int:
  """
  Raise base to a nonnegative exponent with wrap-around

  Same result as multiplying base by itself exponent times in 64 bits,
  without spending exponent steps to get there.
  """
  return wrap_int(pow(base, exponent, _INT_MOD))


# ============================================================================
# CONSTRUCTORS
# ============================================================================

def make_value(value: Any, type_name: str) -> Dict:
  """Create a runtime value"""
  if type_name not in VALUE_TYPES:
    raise ValueError(f"Unknown value type: {type_name}")
  return {
      'type': type_name,
      'value': value
  }


def make_number(n: int) -> Dict:
  return make_value(n, NUMBER)


def make_symbol(name: str) -> Dict:
  return make_value(name, SYMBOL)


def make_error(message: str, kind: str = ERR_INVALID_INPUT) -> Dict:
  """Create an error value; kind names the failure, message is what gets printed"""
  err = make_value(message, ERROR)
  err['kind'] = kind
  return err


def make_function(func: Callable[[Dict, List[Dict]], Dict], name: str = "<builtin>") -> Dict:
  """Wrap a native callable (env, args) -> value"""
  fun = make_value(func, FUNCTION)
  fun['name'] = name
  return fun


def make_sexpr(cells: List[Dict] = None) -> Dict:
  return make_value(list(cells) if cells else [], SEXPR)


def make_qexpr(cells: List[Dict] = None) -> Dict:
  return make_value(list(cells) if cells else [], QEXPR)


# ============================================================================
# PREDICATES
# ============================================================================

def is_type(val: Dict, type_name: str) -> bool:
  return val['type'] == type_name


def is_error(val: Dict) -> bool:
  return val['type'] == ERROR


def is_list_value(val: Dict) -> bool:
  """True for both S- and Q-Expressions"""
  return val['type'] in (SEXPR, QEXPR)


def error_kind(val: Dict) -> str:
  return val.get('kind', ERR_INVALID_INPUT)


# ============================================================================
# COPY
# ============================================================================

def copy_value(val: Dict) -> Dict:
  """Deep copy a value tree; function callables are shared, never copied"""
  value_type = val['type']

  if value_type == NUMBER:
    return make_number(val['value'])
  elif value_type == SYMBOL:
    return make_symbol(val['value'])
  elif value_type == ERROR:
    return make_error(val['value'], error_kind(val))
  elif value_type == FUNCTION:
    return make_function(val['value'], val.get('name', "<builtin>"))
  elif is_list_value(val):
    return make_value([copy_value(cell) for cell in val['value']], value_type)
  else:
    raise ValueError(f"Cannot copy value of type {value_type}")


# ============================================================================
# RENDERING
# ============================================================================

def _show_cells(val: Dict, open_char: str, close_char: str) -> str:
  return open_char + " ".join(show_value(cell) for cell in val['value']) + close_char


def show_value(val: Dict) -> str:
  """Render a value in its external textual form"""
  value_type = val['type']

  if value_type == NUMBER:
    return str(val['value'])
  elif value_type == ERROR:
    return f"Error: {val['value']}"
  elif value_type == SYMBOL:
    return val['value']
  elif value_type == FUNCTION:
    return "<function>"
  elif value_type == SEXPR:
    return _show_cells(val, '(', ')')
  elif value_type == QEXPR:
    return _show_cells(val, '{', '}')
  else:
    raise ValueError(f"Cannot show value of type {value_type}")


def print_value(val: Dict) -> None:
  """Print a value followed by a newline"""
  print(show_value(val))
