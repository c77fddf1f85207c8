"""
Lispy Programming Language - Main Entry Point
A minimal Lisp with S-Expressions, Q-Expressions and a single global environment
"""

import sys
import argparse
import os
from pathlib import Path
from typing import Dict, List, Optional

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from environment import env_list_names
from error_handling import LispyParseError
from interpreter import interpret_line
from parsing import create_parser, pretty_print_cst
from repl import RunState, make_session, run_repl, run_lines
from values import show_value


VERSION = "Lispy Version 0.0.0.0.11"
HISTORY_ENV_VAR = "LISPY_HISTORY"
DEFAULT_HISTORY_FILE = "~/.lispy_history"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Lispy - a minimal Lisp with S-Expressions and Q-Expressions',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s                          # Interactive mode
  %(prog)s script.lspy              # Run a script, one expression per line
  %(prog)s -i script.lspy           # Run a script, then keep its bindings in the prompt
  %(prog)s -e "(+ 1 (* 2 3))"       # Evaluate a single expression
  %(prog)s --parse script.lspy      # Parse and show CST
  %(prog)s --debug                  # Trace parsing and evaluation
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Lispy script file to execute'
  )

  parser.add_argument(
      '-e', '--eval',
      metavar='EXPR',
      dest='expression',
      help='Evaluate a single line and print the result'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode (after running the script, if one is given)'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show CST (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--no-history',
      action='store_true',
      help='Do not read or write the readline history file'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def parse_file(script_path: str, debug: bool = False) -> None:
  """Parse a Lispy script file and show the CST"""
  try:
    parser = create_parser(debug)

    print(f"Parsing {script_path}...")
    cst_nodes = parser.parse_file(script_path)

    print(f"\nParsed {len(cst_nodes)} lines:")
    print("=" * 50)

    for node in cst_nodes:
      print(f"\nLine {node.span.start_line}:")
      print(pretty_print_cst(node), end="")

  except LispyParseError as e:
    print(e)
    sys.exit(1)


def evaluate_expression(expression: str, debug: bool = False) -> None:
  """Evaluate one line and print its rendering"""
  session = make_session(debug, filename="<eval>")
  try:
    result = interpret_line(session['interpreter'], expression, "<eval>")
  except LispyParseError as e:
    print(e)
    sys.exit(1)
  print(show_value(result))


def run_script_file(script_path: str, debug: bool = False) -> Dict:
  """Run a Lispy script file line by line, printing each result"""
  session = make_session(debug, filename=script_path, skip_blank=True)
  with open(script_path, 'r', encoding='utf-8') as f:
    run_lines(session, f)
  return session


def load_script(script_path: str, debug: bool = False) -> Dict:
  """Run a script, turning file problems into a message and exit status 1"""
  try:
    return run_script_file(script_path, debug)
  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found")
    print(f"  Hint: Check the file path and make sure the file exists")
    sys.exit(1)
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'")
    print(f"  Hint: Make sure you have read permissions for this file")
    sys.exit(1)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}")
    print(f"  Hint: Make sure the file is a text file with UTF-8 encoding")
    sys.exit(1)


def history_file_path() -> str:
  return os.path.expanduser(os.environ.get(HISTORY_ENV_VAR, DEFAULT_HISTORY_FILE))


def make_completer(session: Dict):
  """Complete against every name currently bound, builtins and definitions alike"""
  def completer(text: str, state: int) -> Optional[str]:
    names = env_list_names(session['interpreter']['env'])
    options = [name for name in names if name.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  return completer


def setup_readline(session: Dict, use_history: bool = True) -> None:
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  readline.set_completer(make_completer(session))
  # Symbols may contain most punctuation, so only whitespace and brackets delimit words
  readline.set_completer_delims(" \t\n(){}")
  readline.parse_and_bind("tab: complete")

  if not use_history:
    return

  history_file = history_file_path()
  try:
    readline.read_history_file(history_file)
  except (FileNotFoundError, PermissionError, OSError):
    pass  # First time, no history yet, or permission denied

  readline.set_history_length(1000)

  # Save history on exit
  import atexit
  atexit.register(_write_history, history_file)


def _write_history(history_file: str) -> None:
  try:
    readline.write_history_file(history_file)
  except OSError:
    pass  # Read-only home directory; history is best effort


def run_interactive_mode(session: Optional[Dict] = None, debug: bool = False,
                         use_history: bool = True) -> None:
  """Run Lispy in interactive mode"""
  print(VERSION)
  print("Type (exit ()) to quit, (values ()) to list bound names")
  if debug:
    print("Debug mode enabled")
  print()

  if session is None:
    session = make_session(debug)
  setup_readline(session, use_history)

  run_repl(session, input)


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for Lispy"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.expression is not None:
    evaluate_expression(args.expression, debug=args.debug)
    return

  if args.script:
    if not Path(args.script).exists():
      print(f"Error: Script file '{args.script}' does not exist")
      sys.exit(1)

    if args.parse:
      parse_file(args.script, debug=args.debug)
      return

    session = load_script(args.script, debug=args.debug)
    if args.interactive and session['state'] != RunState.TERMINATED:
      # Keep the script's bindings but report syntax errors against the prompt
      session['filename'] = "<stdin>"
      session['line_number'] = 0
      session['skip_blank'] = False
      run_interactive_mode(session, debug=args.debug, use_history=not args.no_history)
    return

  run_interactive_mode(debug=args.debug, use_history=not args.no_history)


if __name__ == "__main__":
  main()
