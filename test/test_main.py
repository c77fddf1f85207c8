"""
Command line tests
"""

import pytest
from main import main, create_arg_parser, make_completer, history_file_path, VERSION
from repl import make_session, handle_line


class TestArguments:

  def test_defaults(self):
    args = create_arg_parser().parse_args([])
    assert args.script is None
    assert args.expression is None
    assert not args.interactive
    assert not args.debug

  def test_version(self, capsys):
    with pytest.raises(SystemExit):
      main(["--version"])
    assert VERSION in capsys.readouterr().out


class TestEval:

  def test_eval_expression(self, capsys):
    main(["-e", "(+ 1 (* 2 3))"])
    assert capsys.readouterr().out == "7\n"

  def test_eval_error_value(self, capsys):
    main(["--eval", "/ 1 0"])
    assert capsys.readouterr().out == "Error: Division by zero!\n"

  def test_eval_syntax_error(self, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main(["-e", "(+ 1"])
    assert exc_info.value.code == 1
    assert "<eval>:1:" in capsys.readouterr().out


class TestScripts:

  def test_run_script(self, tmp_path, capsys):
    script = tmp_path / "prog.lspy"
    script.write_text("def {xs} {1 2 3}\n\n(len xs)\nhead xs\n")
    main([str(script)])
    assert capsys.readouterr().out.splitlines() == ["()", "3", "{1}"]

  def test_script_exit_stops_remaining_lines(self, tmp_path, capsys):
    script = tmp_path / "prog.lspy"
    script.write_text("+ 1 1\nexit ()\ny\n+ 2 2\n")
    main([str(script)])
    assert capsys.readouterr().out.splitlines() == ["2", "()"]

  def test_missing_script(self, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
      main([str(tmp_path / "missing.lspy")])
    assert exc_info.value.code == 1
    assert "does not exist" in capsys.readouterr().out

  def test_parse_only(self, tmp_path, capsys):
    script = tmp_path / "prog.lspy"
    script.write_text("(+ 1 2)\n{x}\n")
    main(["--parse", str(script)])
    out = capsys.readouterr().out
    assert "Parsed 2 lines:" in out
    assert "sexpr" in out
    assert "qexpr" in out

  def test_parse_only_syntax_error(self, tmp_path, capsys):
    script = tmp_path / "bad.lspy"
    script.write_text("(+ 1 2\n")
    with pytest.raises(SystemExit):
      main(["--parse", str(script)])
    assert f"{script}:1:" in capsys.readouterr().out


class TestReadline:

  def test_completer_sees_definitions(self):
    session = make_session()
    handle_line(session, "def {hello} 1")
    completer = make_completer(session)
    assert completer("he", 0) == "head"
    assert completer("he", 1) == "hello"
    assert completer("he", 2) is None
    assert completer("hel", 0) == "hello"

  def test_history_path_from_environment(self, monkeypatch, tmp_path):
    monkeypatch.setenv("LISPY_HISTORY", str(tmp_path / "hist"))
    assert history_file_path() == str(tmp_path / "hist")
