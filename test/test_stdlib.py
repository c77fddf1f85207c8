"""
Tests for the Lispy builtin functions
"""

import pytest
from values import (
  make_number, make_symbol, make_qexpr, make_sexpr, show_value, error_kind, is_error,
  INT_MAX, INT_MIN,
  ERR_ARITY_MISMATCH, ERR_TYPE_MISMATCH, ERR_EMPTY_LIST, ERR_DIVISION_BY_ZERO,
  ERR_INVALID_EXPONENT, ERR_PROTECTED_NAME, ERR_INVALID_INPUT,
)
from stdlib import builtin_op, builtin_cons, builtin_join, builtin_head, builtin_values, make_exit_builtin


def assert_error(result, kind):
  assert is_error(result), show_value(result)
  assert error_kind(result) == kind


class TestListFunctions:
  """list, head, tail, join, cons, len, init"""

  def test_list(self, show):
    assert show("list 1 2 3") == "{1 2 3}"
    assert show("list 1 (+ 1 1) {x}") == "{1 2 {x}}"
    assert show("list") == "<function>"

  def test_list_of_functions(self, show):
    assert show("list + -") == "{<function> <function>}"

  def test_head(self, show):
    assert show("head {1 2 3}") == "{1}"
    assert show("head {{1 2} 3}") == "{{1 2}}"

  def test_tail(self, show):
    assert show("tail {1 2 3}") == "{2 3}"
    assert show("tail {1}") == "{}"

  def test_init(self, show):
    assert show("init {1 2 3}") == "{1 2}"
    assert show("init {1}") == "{}"

  @pytest.mark.parametrize("name", ["head", "tail", "init"])
  def test_empty_list(self, evaluate, name):
    result = evaluate(f"({name} {{}})")
    assert_error(result, ERR_EMPTY_LIST)
    assert show_value(result) == f"Error: Function '{name}' passed empty list {{}}."

  @pytest.mark.parametrize("name", ["head", "tail", "init", "len", "eval"])
  def test_requires_qexpr(self, evaluate, name):
    result = evaluate(f"({name} 1)")
    assert_error(result, ERR_TYPE_MISMATCH)
    assert show_value(result) == (
      f"Error: Function '{name}' passed incorrect type for argument 0. Got Number, expected Q-Expression."
    )

  @pytest.mark.parametrize("name", ["head", "tail", "init", "len", "eval"])
  def test_requires_one_argument(self, evaluate, name):
    result = evaluate(f"({name} {{1}} {{2}})")
    assert_error(result, ERR_ARITY_MISMATCH)
    assert show_value(result) == (
      f"Error: Function '{name}' passed incorrect number of arguments. Got 2, expected 1."
    )

  def test_join(self, show):
    assert show("join {1 2} {3}") == "{1 2 3}"
    assert show("join {} {1} {} {2 3}") == "{1 2 3}"
    assert show("join {1}") == "{1}"

  def test_join_type_error_names_argument(self, evaluate):
    result = evaluate("join {1} 2")
    assert_error(result, ERR_TYPE_MISMATCH)
    assert "argument 1" in show_value(result)

  def test_join_without_arguments(self, env):
    assert_error(builtin_join(env, []), ERR_ARITY_MISMATCH)

  def test_cons(self, show):
    assert show("cons 0 {1 2}") == "{0 1 2}"
    assert show("cons 0 {}") == "{0}"

  def test_cons_symbol(self, env):
    result = builtin_cons(env, [make_symbol("a"), make_qexpr([make_number(1)])])
    assert show_value(result) == "{a 1}"

  def test_cons_type_errors(self, evaluate):
    result = evaluate("cons {0} {1}")
    assert_error(result, ERR_TYPE_MISMATCH)
    assert show_value(result).endswith("Got Q-Expression, expected Number or Symbol.")
    assert_error(evaluate("cons 0 1"), ERR_TYPE_MISMATCH)
    assert_error(evaluate("cons 0"), ERR_ARITY_MISMATCH)

  def test_len(self, show):
    assert show("len {}") == "0"
    assert show("len {1 {2 3} x}") == "3"

  def test_head_does_not_touch_argument_list(self, env):
    args = [make_qexpr([make_number(1), make_number(2)])]
    builtin_head(env, args)
    assert show_value(args[0]) == "{1 2}"


class TestArithmetic:
  """+ - * / % ^ min max and their word aliases"""

  @pytest.mark.parametrize("text,expected", [
      ("+ 1 2 3", "6"),
      ("add 1 2", "3"),
      ("- 10 3 2", "5"),
      ("sub 1 2", "-1"),
      ("- 5", "-5"),
      ("* 2 3 4", "24"),
      ("mul 2 2", "4"),
      ("/ 20 2 5", "2"),
      ("div 7 2", "3"),
      ("/ -7 2", "-3"),
      ("% 7 3", "1"),
      ("mod -7 3", "-1"),
      ("^ 2 10", "1024"),
      ("pow 3 0", "1"),
      ("^ 2 3 2", "64"),
      ("min 3 1 2", "1"),
      ("max 3 1 2", "3"),
      ("max -5 -2", "-2"),
      ("min -5 -2", "-5"),
      ("+ 5", "5"),
  ])
  def test_results(self, show, text, expected):
    assert show(text) == expected

  @pytest.mark.parametrize("text", ["/ 4 0", "% 4 0", "div 1 0", "mod 1 0", "/ 8 2 0 1"])
  def test_division_by_zero(self, evaluate, text):
    result = evaluate(text)
    assert_error(result, ERR_DIVISION_BY_ZERO)
    assert show_value(result) == "Error: Division by zero!"

  def test_negative_exponent(self, evaluate):
    assert_error(evaluate("^ 2 -1"), ERR_INVALID_EXPONENT)

  def test_requires_numbers(self, evaluate):
    result = evaluate("+ 1 {2}")
    assert_error(result, ERR_TYPE_MISMATCH)
    assert show_value(result) == (
      "Error: Function '+' passed incorrect type for argument 1. Got Q-Expression, expected Number."
    )

  def test_requires_arguments(self, env):
    assert_error(builtin_op(env, [], op='+'), ERR_ARITY_MISMATCH)

  def test_overflow_wraps(self, env):
    assert builtin_op(env, [make_number(INT_MAX), make_number(1)], op='+')['value'] == INT_MIN
    assert builtin_op(env, [make_number(INT_MIN)], op='-')['value'] == INT_MIN


class TestDef:
  """Variable definition"""

  def test_define_and_lookup(self, evaluate, show):
    assert show("def {x} 5") == "()"
    assert show("x") == "5"

  def test_define_many(self, evaluate, show):
    evaluate("def {a b c} 1 2 {3}")
    assert show("list a b c") == "{1 2 {3}}"

  def test_redefine(self, evaluate, show):
    evaluate("def {x} 1")
    evaluate("def {x} (+ x 1)")
    assert show("x") == "2"

  def test_defined_list_can_be_evaluated(self, evaluate, show):
    evaluate("def {f} {+ 1 2}")
    assert show("eval f") == "3"

  def test_define_function_alias(self, evaluate, show):
    evaluate("def {plus} +")
    assert show("plus 2 3") == "5"

  def test_protected_name(self, evaluate, show):
    result = evaluate("def {+} 5")
    assert_error(result, ERR_PROTECTED_NAME)
    assert show("+ 1 2") == "3"

  def test_protected_name_rejects_whole_definition(self, evaluate):
    result = evaluate("def {a head} 1 2")
    assert_error(result, ERR_PROTECTED_NAME)
    assert_error(evaluate("a"), "UnboundSymbol")

  def test_count_mismatch(self, evaluate):
    assert_error(evaluate("def {a b} 1"), ERR_ARITY_MISMATCH)
    assert_error(evaluate("def {a} 1 2"), ERR_ARITY_MISMATCH)
    assert_error(evaluate("a"), "UnboundSymbol")

  def test_non_symbol_names(self, evaluate):
    result = evaluate("def {a 1} 1 2")
    assert_error(result, ERR_TYPE_MISMATCH)
    assert "expected Symbol" in show_value(result)

  def test_first_argument_must_be_qexpr(self, evaluate):
    assert_error(evaluate("def 1 2"), ERR_TYPE_MISMATCH)

  def test_too_few_arguments(self, evaluate):
    assert_error(evaluate("def {}"), ERR_ARITY_MISMATCH)


class TestSessionBuiltins:
  """values and exit"""

  def test_values_lists_names_in_order(self, evaluate, capsys):
    evaluate("def {zz} 1")
    assert show_value(evaluate("values ()")) == "()"
    names = capsys.readouterr().out.splitlines()
    assert names[:3] == ["head", "tail", "list"]
    assert names[-3:] == ["values", "exit", "zz"]
    assert "%" in names

  def test_values_rejects_input(self, evaluate, env):
    assert_error(evaluate("values 1"), ERR_TYPE_MISMATCH)
    assert_error(builtin_values(env, [make_sexpr([make_number(1)])]), ERR_INVALID_INPUT)
    assert_error(evaluate("values () ()"), ERR_ARITY_MISMATCH)

  def test_exit_calls_back(self, env):
    calls = []
    builtin_exit = make_exit_builtin(lambda: calls.append(True))
    assert show_value(builtin_exit(env, [make_sexpr()])) == "()"
    assert calls == [True]

  def test_exit_validates_before_calling_back(self, env):
    calls = []
    builtin_exit = make_exit_builtin(lambda: calls.append(True))
    assert_error(builtin_exit(env, [make_number(1)]), ERR_TYPE_MISMATCH)
    assert calls == []

  def test_exit_without_driver_is_harmless(self, show):
    assert show("exit ()") == "()"
