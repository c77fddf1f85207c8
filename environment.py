"""
Lispy Environment
A single flat symbol table; there is exactly one global scope
"""

from typing import Dict, FrozenSet, List, Optional

from values import copy_value, make_error, ERR_UNBOUND_SYMBOL


# ============================================================================
# DATA STRUCTURES
# ============================================================================

def make_environment(protected: Optional[FrozenSet[str]] = None, debug: bool = False) -> Dict:
  """
  Create an empty environment

  Args:
    protected: Names that `def` may never rebind (the builtin identifiers)
    debug: Trace evaluation steps through this environment

  Returns:
    Environment dict; 'bindings' preserves insertion order
  """
  return {
      'bindings': {},
      'protected': frozenset(protected or ()),
      'debug': debug
  }


# ============================================================================
# ENVIRONMENT OPERATIONS
# ============================================================================

def env_get(env: Dict, name: str) -> Dict:
  """Look up a name, returning a copy of its value or an unbound-symbol error"""
  value = env['bindings'].get(name)
  if value is None:
    return make_error(f"Unbound symbol '{name}'", ERR_UNBOUND_SYMBOL)
  return copy_value(value)


def env_put(env: Dict, name: str, value: Dict) -> None:
  """Bind name to a copy of value, replacing any existing binding in place"""
  env['bindings'][name] = copy_value(value)


def env_is_protected(env: Dict, name: str) -> bool:
  return name in env['protected']


def env_list_names(env: Dict) -> List[str]:
  return list(env['bindings'].keys())
