"""
Lispy Standard Library
Builtin functions bound into the global environment
Every builtin takes (env, args) and returns a value; failures come back as Error values
"""

from functools import partial
from typing import Callable, Dict, List, Optional

from environment import env_put, env_is_protected, env_list_names
from utilities import (
  check_arity,
  check_min_arity,
  check_type,
  check_all_types,
  first_error,
  validate_list_arg,
  validate_numbers,
  validate_symbols,
)
from values import (
  make_error,
  make_number,
  make_qexpr,
  make_sexpr,
  wrap_int,
  int_div,
  int_mod,
  int_pow,
  NUMBER, SYMBOL, SEXPR, QEXPR,
  ERR_DIVISION_BY_ZERO,
  ERR_INVALID_EXPONENT,
  ERR_PROTECTED_NAME,
  ERR_ARITY_MISMATCH,
  ERR_INVALID_INPUT,
)


# ============================================================================
# LIST FUNCTIONS
# ============================================================================

def builtin_list(env: Dict, args: List[Dict]) -> Dict:
  """Collect the arguments into a Q-Expression"""
  return make_qexpr(args)


def builtin_head(env: Dict, args: List[Dict]) -> Dict:
  """Q-Expression holding only the first element"""
  err = validate_list_arg("head", args, nonempty=True)
  if err:
    return err
  return make_qexpr(args[0]['value'][:1])


def builtin_tail(env: Dict, args: List[Dict]) -> Dict:
  """Q-Expression with the first element removed"""
  err = validate_list_arg("tail", args, nonempty=True)
  if err:
    return err
  return make_qexpr(args[0]['value'][1:])


def builtin_init(env: Dict, args: List[Dict]) -> Dict:
  """Q-Expression with the last element removed"""
  err = validate_list_arg("init", args, nonempty=True)
  if err:
    return err
  return make_qexpr(args[0]['value'][:-1])


def builtin_len(env: Dict, args: List[Dict]) -> Dict:
  err = validate_list_arg("len", args)
  if err:
    return err
  return make_number(len(args[0]['value']))


def builtin_join(env: Dict, args: List[Dict]) -> Dict:
  """Concatenate one or more Q-Expressions in argument order"""
  err = first_error([
      lambda: check_min_arity("join", args, 1),
      lambda: check_all_types("join", args, QEXPR),
  ])
  if err:
    return err

  cells = []
  for qexpr in args:
    cells.extend(qexpr['value'])
  return make_qexpr(cells)


def builtin_cons(env: Dict, args: List[Dict]) -> Dict:
  """Prepend a number or symbol to a Q-Expression"""
  err = first_error([
      lambda: check_arity("cons", args, 2),
      lambda: check_type("cons", args, 0, NUMBER, SYMBOL),
      lambda: check_type("cons", args, 1, QEXPR),
  ])
  if err:
    return err

  elem, lst = args
  return make_qexpr([elem] + lst['value'])


# ============================================================================
# ARITHMETIC FUNCTIONS
# ============================================================================

def _apply_op(op: str, x: int, y: int) -> Dict:
  """Combine two operands; returns a Number or the Error that stops the fold"""
  if op == '+':
    return make_number(wrap_int(x + y))
  if op == '-':
    return make_number(wrap_int(x - y))
  if op == '*':
    return make_number(wrap_int(x * y))
  if op in ('/', '%'):
    if y == 0:
      return make_error("Division by zero!", ERR_DIVISION_BY_ZERO)
    return make_number(int_div(x, y) if op == '/' else int_mod(x, y))
  if op == '^':
    if y < 0:
      return make_error("Invalid exponent! Exponent must be nonnegative.", ERR_INVALID_EXPONENT)
    return make_number(int_pow(x, y))
  if op == 'min':
    return make_number(x if x <= y else y)
  if op == 'max':
    return make_number(x if x >= y else y)
  raise ValueError(f"Unknown arithmetic operator: {op}")


def builtin_op(env: Dict, args: List[Dict], op: str) -> Dict:
  """
  Left fold of an arithmetic operator over Number arguments

  A lone argument to '-' is negated; for every other operator a lone
  argument is returned as is.
  """
  err = validate_numbers(op, args)
  if err:
    return err

  x = args[0]['value']
  if op == '-' and len(args) == 1:
    return make_number(wrap_int(-x))

  result = make_number(x)
  for y in args[1:]:
    result = _apply_op(op, result['value'], y['value'])
    if result['type'] != NUMBER:
      break
  return result


# Operator name -> canonical operator symbol
ARITHMETIC_OPERATORS = {
    '+': '+', 'add': '+',
    '-': '-', 'sub': '-',
    '*': '*', 'mul': '*',
    '/': '/', 'div': '/',
    '%': '%', 'mod': '%',
    '^': '^', 'pow': '^',
    'min': 'min',
    'max': 'max',
}


def arithmetic_builtins() -> Dict[str, Callable]:
  """Bind builtin_op once per operator name, aliases included"""
  return {name: partial(builtin_op, op=op) for name, op in ARITHMETIC_OPERATORS.items()}


# ============================================================================
# VARIABLE FUNCTIONS
# ============================================================================

def _check_def_count(syms: List[Dict], values: List[Dict]) -> Optional[Dict]:
  if len(syms) != len(values):
    return make_error(
      "Function 'def' cannot define incorrect number of values to symbols",
      ERR_ARITY_MISMATCH
    )
  return None


def _check_protected(env: Dict, syms: List[Dict]) -> Optional[Dict]:
  for sym in syms:
    if env_is_protected(env, sym['value']):
      return make_error(
        f"Function 'def' cannot define builtin symbol '{sym['value']}'",
        ERR_PROTECTED_NAME
      )
  return None


def builtin_def(env: Dict, args: List[Dict]) -> Dict:
  """
  Bind each symbol of a Q-Expression to the matching trailing argument

  All checks run before the first binding, so a rejected definition
  leaves the environment untouched.
  """
  err = first_error([
      lambda: check_min_arity("def", args, 2),
      lambda: check_type("def", args, 0, QEXPR),
      lambda: validate_symbols("def", args[0]['value']),
      lambda: _check_def_count(args[0]['value'], args[1:]),
      lambda: _check_protected(env, args[0]['value']),
  ])
  if err:
    return err

  syms, values = args[0]['value'], args[1:]
  for sym, value in zip(syms, values):
    env_put(env, sym['value'], value)

  return make_sexpr()


def _check_empty_sexpr(func_name: str, arg: Dict) -> Optional[Dict]:
  if arg['value']:
    return make_error(f"Function '{func_name}' passed invalid input", ERR_INVALID_INPUT)
  return None


def _check_unit_arg(func_name: str, args: List[Dict]) -> Optional[Dict]:
  """The session builtins take exactly one empty S-Expression: (f ())"""
  return first_error([
      lambda: check_arity(func_name, args, 1),
      lambda: check_type(func_name, args, 0, SEXPR),
      lambda: _check_empty_sexpr(func_name, args[0]),
  ])


def builtin_values(env: Dict, args: List[Dict]) -> Dict:
  """Print every bound name, one per line, in binding order"""
  err = _check_unit_arg("values", args)
  if err:
    return err

  for name in env_list_names(env):
    print(name)

  return make_sexpr()


# ============================================================================
# SESSION FUNCTIONS
# ============================================================================

def make_exit_builtin(on_exit: Callable[[], None]) -> Callable[[Dict, List[Dict]], Dict]:
  """
  Create the `exit` builtin

  The run state belongs to whoever drives the evaluator, so exit only
  reports the request through on_exit and returns normally.
  """
  def builtin_exit(env: Dict, args: List[Dict]) -> Dict:
    err = _check_unit_arg("exit", args)
    if err:
      return err
    on_exit()
    return make_sexpr()

  return builtin_exit
