"""
Lispy driving loop
Reads lines from a line source, evaluates them and prints the results.
The run state lives here, never in the evaluator.
"""

from enum import Enum
from typing import Callable, Dict, Iterable

from error_handling import LispyParseError
from interpreter import create_interpreter, interpret_line
from values import show_value, is_error, error_kind, ERR_UNBOUND_SYMBOL


PROMPT = "lispy> "
CONFIRM_PROMPT = "Exit Lispy? (y/n) "

# Evaluating the answer `y` fails with exactly this unbound-symbol error
CONFIRM_ANSWER = "y"

LineSource = Callable[[str], str]


class RunState(Enum):
  RUNNING = "running"
  CONFIRM_EXIT = "confirm_exit"
  TERMINATED = "terminated"


# ============================================================================
# SESSION STATE
# ============================================================================

def make_session(debug: bool = False, filename: str = "<stdin>", skip_blank: bool = False) -> Dict:
  """
  Create a session: run state plus an interpreter whose `exit` reports back here

  Args:
    debug: Trace parsing and evaluation
    filename: Name used in syntax error locations
    skip_blank: Count blank lines but do not evaluate them (script mode)
  """
  session = {
      'state': RunState.RUNNING,
      'filename': filename,
      'line_number': 0,
      'skip_blank': skip_blank,
  }
  session['interpreter'] = create_interpreter(debug, on_exit=lambda: request_exit(session))
  return session


def request_exit(session: Dict) -> None:
  """Running -> ConfirmExit; called by the `exit` builtin"""
  if session['state'] == RunState.RUNNING:
    session['state'] = RunState.CONFIRM_EXIT


def is_exit_confirmation(result: Dict) -> bool:
  """The answer confirms only if evaluating it failed on the unbound symbol `y`"""
  return (
      is_error(result)
      and error_kind(result) == ERR_UNBOUND_SYMBOL
      and result['value'] == f"Unbound symbol '{CONFIRM_ANSWER}'"
  )


def confirm_exit(session: Dict, result: Dict) -> None:
  """ConfirmExit -> Terminated on `y`, back to Running on anything else"""
  if is_exit_confirmation(result):
    session['state'] = RunState.TERMINATED
  else:
    session['state'] = RunState.RUNNING


def current_prompt(session: Dict) -> str:
  return CONFIRM_PROMPT if session['state'] == RunState.CONFIRM_EXIT else PROMPT


# ============================================================================
# LOOP
# ============================================================================

def handle_line(session: Dict, line: str) -> None:
  """Evaluate one input line in the session's current state and print what it produced"""
  session['line_number'] += 1
  if session['skip_blank'] and not line.strip():
    return

  confirming = session['state'] == RunState.CONFIRM_EXIT

  try:
    result = interpret_line(
      session['interpreter'], line, session['filename'], session['line_number']
    )
  except LispyParseError as e:
    # A syntax error leaves the state as it was, including a pending confirmation
    print(e)
    return

  if confirming:
    confirm_exit(session, result)
  else:
    print(show_value(result))


def run_repl(session: Dict, line_source: LineSource = input, terminate_on_eof: bool = True) -> None:
  """
  Drive the session until it terminates or input runs out

  Args:
    session: Session from make_session
    line_source: Called with the prompt, returns the next line; raises EOFError at end of input
    terminate_on_eof: End of input terminates the session; a script leaves the state as it is
  """
  while session['state'] != RunState.TERMINATED:
    try:
      line = line_source(current_prompt(session))
    except EOFError:
      if terminate_on_eof:
        session['state'] = RunState.TERMINATED
      break
    except KeyboardInterrupt:
      print()
      continue

    handle_line(session, line)


def lines_source(lines: Iterable[str]) -> LineSource:
  """Adapt an iterable of lines (a script) to a line source; prompts are not shown"""
  iterator = iter(lines)

  def next_line(prompt: str) -> str:
    try:
      return next(iterator).rstrip('\n')
    except StopIteration:
      raise EOFError from None

  return next_line


def run_lines(session: Dict, lines: Iterable[str]) -> None:
  """Run a script through the same loop the prompt uses"""
  run_repl(session, lines_source(lines), terminate_on_eof=False)
