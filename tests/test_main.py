import io
import logging

import pytest
from graphviz import ExecutableNotFound

import main


@pytest.fixture
def stdin(monkeypatch):
    def feed(text):
        monkeypatch.setattr("sys.stdin", io.StringIO(text))

    return feed


def test_minimizes_stdin(stdin, capsys, scenario_text):
    stdin(scenario_text)
    assert main.main([]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[:4] == ["q0,q1,q3", "a,b", "q3", "q0"]
    assert len(out.splitlines()) == 4 + 3 * 2
    assert out.endswith("\n")


def test_reads_file_and_writes_output(tmp_path, capsys, scenario_text):
    source = tmp_path / "dfa.txt"
    source.write_text(scenario_text, encoding="utf-8")
    target = tmp_path / "min.txt"

    assert main.main([str(source), "-o", str(target)]) == 0
    assert capsys.readouterr().out == ""
    assert target.read_text(encoding="utf-8").splitlines()[0] == "q0,q1,q3"


def test_already_minimal_is_unchanged(stdin, capsys):
    text = "s0,s1\na\ns1\ns0\ns0,a->s1\ns1,a->s0\n"
    stdin(text)
    assert main.main([]) == 0
    assert capsys.readouterr().out == text


def test_malformed_input_produces_no_output(stdin, capsys, caplog):
    stdin("q0,q1\na,b\nq1\n")
    with caplog.at_level(logging.ERROR, logger="main"):
        assert main.main([]) == 1
    assert capsys.readouterr().out == ""
    assert "Malformed input" in caplog.text


def test_invalid_automaton_produces_no_output(stdin, capsys, caplog):
    stdin("q0,q1\na\nq1\nq0\nq0,a->q5\nq1,a->q1\n")
    with caplog.at_level(logging.ERROR, logger="main"):
        assert main.main([]) == 1
    assert capsys.readouterr().out == ""
    assert "Invalid automaton" in caplog.text
    assert "q5" in caplog.text


def test_missing_input_file(tmp_path, capsys, caplog):
    with caplog.at_level(logging.ERROR, logger="main"):
        assert main.main([str(tmp_path / "nope.txt")]) == 1
    assert capsys.readouterr().out == ""
    assert "Cannot read input" in caplog.text


def test_graph_option_renders(stdin, capsys, monkeypatch, scenario_text):
    rendered = []

    def fake_to_graphviz(self, filename=None, view=False):
        rendered.append((len(self.states), filename, view))

    monkeypatch.setattr("automaton.Automaton.to_graphviz", fake_to_graphviz)
    stdin(scenario_text)
    assert main.main(["--graph", "out", "--view"]) == 0
    assert rendered == [(3, "out", True)]


def test_rejects_unknown_log_level():
    with pytest.raises(SystemExit):
        main.main(["--log-level", "LOUD"])


def test_failed_render_writes_nothing(tmp_path, stdin, capsys, caplog, monkeypatch, scenario_text):
    def missing_dot(self, filename=None, view=False):
        raise ExecutableNotFound(["dot"])

    monkeypatch.setattr("automaton.Automaton.to_graphviz", missing_dot)
    target = tmp_path / "min.txt"
    stdin(scenario_text)
    with caplog.at_level(logging.ERROR, logger="main"):
        assert main.main(["-o", str(target), "--graph", "g"]) == 1
    assert not target.exists()
    assert capsys.readouterr().out == ""
    assert "Cannot render graph" in caplog.text


def test_failed_render_to_stdout_writes_nothing(stdin, capsys, monkeypatch, scenario_text):
    def missing_dot(self, filename=None, view=False):
        raise ExecutableNotFound(["dot"])

    monkeypatch.setattr("automaton.Automaton.to_graphviz", missing_dot)
    stdin(scenario_text)
    assert main.main(["--graph", "g"]) == 1
    assert capsys.readouterr().out == ""
