"""
Lispy Interpreter
Builtin registry and the recursive evaluator
Values and environments are plain dictionaries; side effects stay in the builtins
"""

from typing import Callable, Dict, List, Optional

from environment import make_environment, env_get, env_put
from parsing import create_parser
from reader import read_line
from stdlib import (
  builtin_list,
  builtin_head,
  builtin_tail,
  builtin_join,
  builtin_cons,
  builtin_len,
  builtin_init,
  builtin_def,
  builtin_values,
  arithmetic_builtins,
  make_exit_builtin,
)
from utilities import validate_list_arg
from values import (
  make_error,
  make_function,
  make_sexpr,
  show_value,
  is_error,
  NUMBER, ERROR, SYMBOL, FUNCTION, SEXPR, QEXPR,
  ERR_NOT_A_FUNCTION,
)


Builtin = Callable[[Dict, List[Dict]], Dict]


# ============================================================================
# BUILT-IN REGISTRY
# ============================================================================

def builtin_eval(env: Dict, args: List[Dict]) -> Dict:
  """Evaluate a Q-Expression as if it were an S-Expression"""
  err = validate_list_arg("eval", args)
  if err:
    return err
  return eval_value(env, make_sexpr(args[0]['value']))


def _exit_ignored() -> None:
  pass


def create_builtin_registry(on_exit: Optional[Callable[[], None]] = None) -> Dict[str, Builtin]:
  """
  Map every builtin name to its native callable

  Args:
    on_exit: Called by `exit`; the driving loop uses it to move its run state

  Returns:
    Registry in registration order
  """
  registry = {
      # List functions
      'head': builtin_head,
      'tail': builtin_tail,
      'list': builtin_list,
      'eval': builtin_eval,
      'join': builtin_join,
      'cons': builtin_cons,
      'len': builtin_len,
      'init': builtin_init,
  }

  # Mathematical functions
  registry.update(arithmetic_builtins())

  # Variable functions
  registry['def'] = builtin_def
  registry['values'] = builtin_values

  # Misc. functions
  registry['exit'] = make_exit_builtin(on_exit or _exit_ignored)

  return registry


# Names `def` may never rebind
BUILTIN_NAMES = frozenset(create_builtin_registry())


def create_builtin_env(on_exit: Optional[Callable[[], None]] = None, debug: bool = False) -> Dict:
  """Create the global environment with every builtin bound"""
  env = make_environment(BUILTIN_NAMES, debug)
  for name, func in create_builtin_registry(on_exit).items():
    env_put(env, name, make_function(func, name))
  return env


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_value(env: Dict, val: Dict) -> Dict:
  """
  Evaluate a value in the environment.
  Symbols are looked up, S-Expressions are reduced, everything else evaluates to itself.
  """
  if env.get('debug'):
    print(f"Evaluating: {show_value(val)}")

  value_type = val['type']

  if value_type == SYMBOL:
    return env_get(env, val['value'])
  elif value_type == SEXPR:
    return eval_sexpr(env, val)
  elif value_type in (NUMBER, ERROR, FUNCTION, QEXPR):
    return val
  else:
    raise ValueError(f"Cannot evaluate value of type {value_type}")


def eval_sexpr(env: Dict, sexpr: Dict) -> Dict:
  """Evaluate every cell left to right, then apply the head to the rest"""
  cells = [eval_value(env, cell) for cell in sexpr['value']]

  # Every cell has run by now; the leftmost error is the result
  for cell in cells:
    if is_error(cell):
      return cell

  if not cells:
    return sexpr

  if len(cells) == 1:
    return cells[0]

  head, args = cells[0], cells[1:]
  if head['type'] != FUNCTION:
    return make_error("First element is not a function!", ERR_NOT_A_FUNCTION)

  if env.get('debug'):
    print(f"Calling {head.get('name', '<builtin>')} with {len(args)} argument(s)")

  return head['value'](env, args)


# ============================================================================
# PROGRAM EVALUATION
# ============================================================================

def create_interpreter(debug: bool = False, on_exit: Optional[Callable[[], None]] = None) -> Dict:
  """Bundle a parser and a fresh global environment"""
  return {
      'parser': create_parser(debug),
      'env': create_builtin_env(on_exit, debug),
      'debug': debug
  }


def create_debug_interpreter(on_exit: Optional[Callable[[], None]] = None) -> Dict:
  return create_interpreter(debug=True, on_exit=on_exit)


def interpret_line(interpreter: Dict, text: str, filename: str = "<stdin>", line_number: int = 1) -> Dict:
  """Parse, read and evaluate one line; LispyParseError propagates to the caller"""
  return eval_value(interpreter['env'], read_line(interpreter['parser'], text, filename, line_number))


def interpret_source(interpreter: Dict, text: str, filename: str = "<input>") -> List[Dict]:
  """Evaluate every non-blank line in order and collect the results"""
  return [
      interpret_line(interpreter, line, filename, line_number)
      for line_number, line in enumerate(text.split('\n'), 1)
      if line.strip()
  ]
