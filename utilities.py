"""
Utilities module for the Lispy interpreter
Argument validation helpers shared by the builtin functions
"""

from typing import Callable, Dict, List, Optional, Sequence

from values import (
  make_error,
  NUMBER, QEXPR, SYMBOL,
  ERR_ARITY_MISMATCH,
  ERR_TYPE_MISMATCH,
  ERR_EMPTY_LIST,
)


# ==================== ERROR MESSAGE BUILDERS ====================

def arity_error(func_name: str, got: int, expected: str) -> Dict:
  """
  Generate arity mismatch error

  Args:
    func_name: Function name
    got: Actual number of arguments
    expected: Expected count, as it should read in the message ("1", "at least 2")

  Returns:
    Error value with formatted message
  """
  return make_error(
    f"Function '{func_name}' passed incorrect number of arguments. "
    f"Got {got}, expected {expected}.",
    ERR_ARITY_MISMATCH
  )


def type_mismatch_error(func_name: str, index: int, actual: Dict, expected: str) -> Dict:
  """
  Generate type mismatch error

  Args:
    func_name: Function name
    index: Position of the offending argument
    actual: Actual argument value
    expected: Expected type name(s)

  Returns:
    Error value with formatted message
  """
  return make_error(
    f"Function '{func_name}' passed incorrect type for argument {index}. "
    f"Got {actual['type']}, expected {expected}.",
    ERR_TYPE_MISMATCH
  )


def empty_list_error(func_name: str) -> Dict:
  return make_error(f"Function '{func_name}' passed empty list {{}}.", ERR_EMPTY_LIST)


# ==================== VALIDATION UTILITIES ====================
# Each check returns None when the arguments pass, otherwise the Error to return.

def check_arity(func_name: str, args: List[Dict], expected: int) -> Optional[Dict]:
  if len(args) != expected:
    return arity_error(func_name, len(args), str(expected))
  return None


def check_min_arity(func_name: str, args: List[Dict], minimum: int) -> Optional[Dict]:
  if len(args) < minimum:
    return arity_error(func_name, len(args), f"at least {minimum}")
  return None


def check_type(func_name: str, args: List[Dict], index: int, *expected_types: str) -> Optional[Dict]:
  """Check that args[index] has one of expected_types"""
  actual = args[index]
  if actual['type'] not in expected_types:
    return type_mismatch_error(func_name, index, actual, " or ".join(expected_types))
  return None


def check_all_types(func_name: str, args: List[Dict], expected_type: str) -> Optional[Dict]:
  for i in range(len(args)):
    err = check_type(func_name, args, i, expected_type)
    if err is not None:
      return err
  return None


def check_nonempty(func_name: str, args: List[Dict], index: int = 0) -> Optional[Dict]:
  if not args[index]['value']:
    return empty_list_error(func_name)
  return None


def first_error(checks: Sequence[Callable[[], Optional[Dict]]]) -> Optional[Dict]:
  """
  Run deferred checks in order and return the first error

  Later checks may assume earlier ones passed, so they are only
  evaluated once everything before them succeeded.

  Examples:
    first_error([
      lambda: check_arity("head", args, 1),
      lambda: check_type("head", args, 0, QEXPR),
    ])
  """
  for check in checks:
    err = check()
    if err is not None:
      return err
  return None


def validate_list_arg(func_name: str, args: List[Dict], nonempty: bool = False) -> Optional[Dict]:
  """Validate the common single Q-Expression argument shape"""
  checks = [
      lambda: check_arity(func_name, args, 1),
      lambda: check_type(func_name, args, 0, QEXPR),
  ]
  if nonempty:
    checks.append(lambda: check_nonempty(func_name, args, 0))
  return first_error(checks)


def validate_numbers(func_name: str, args: List[Dict]) -> Optional[Dict]:
  return first_error([
      lambda: check_min_arity(func_name, args, 1),
      lambda: check_all_types(func_name, args, NUMBER),
  ])


def validate_symbols(func_name: str, cells: List[Dict]) -> Optional[Dict]:
  """Every element of a symbol list must be a Symbol"""
  return check_all_types(func_name, cells, SYMBOL)
