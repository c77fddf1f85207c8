"""
Test configuration for Lispy tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from interpreter import create_interpreter, interpret_line
from parsing import create_parser
from values import show_value


@pytest.fixture
def parser():
  """Provide a fresh parser for each test"""
  return create_parser()


@pytest.fixture
def interpreter():
  """Provide a fresh interpreter (parser + global environment) for each test"""
  return create_interpreter()


@pytest.fixture
def env(interpreter):
  return interpreter['env']


@pytest.fixture
def evaluate(interpreter):
  """Evaluate one line of source and return the result value"""
  def run(text: str):
    return interpret_line(interpreter, text)
  return run


@pytest.fixture
def show(evaluate):
  """Evaluate one line of source and return its printed form"""
  def run(text: str) -> str:
    return show_value(evaluate(text))
  return run
