import os
from pathlib import Path
import pytest
from markov import Engine
from markov.__main__ import main

FOX = "The quick brown fox jumps over the lazy dog"


def _seed(tmp: Path) -> Path:
    root = tmp / "Archive"; root.mkdir()
    (root / "fox.txt").write_text(FOX + "\n", encoding="utf-8")
    return root


@pytest.mark.e2e
def test_engine_ingest_paths_then_generate(tmp_path: Path):
    root = _seed(tmp_path)
    eng = Engine().open(f"sqlite:///{tmp_path / 'chain.sqlite'}")
    try:
        st = eng.ingest_paths([str(root)], order=3, author="test")
        assert st.observations == 6
        assert eng.generate(["The"]) == FOX
        assert eng.stats() == {"prefixes": 6, "suffixes": 6}
        assert [p.tuple.encode() for p in eng.search("the", limit=1)] == ["The quick brown"]
    finally:
        eng.shutdown()


@pytest.mark.e2e
def test_engine_parallel_paths(tmp_path: Path):
    root = tmp_path / "many"; root.mkdir()
    for i in range(4):
        (root / f"{i}.txt").write_text("carol a b c\n", encoding="utf-8")
    eng = Engine().open("memory://")
    try:
        st = eng.ingest_paths([str(root)], order=1, workers=3)
        assert st.lines == 4
        assert eng.stats() == {"prefixes": 2, "suffixes": 2}
    finally:
        eng.shutdown()


def test_engine_requires_open():
    with pytest.raises(RuntimeError):
        Engine().generate()


@pytest.mark.e2e
def test_cli_ingest_generate_search_stats(tmp_path: Path, capsys):
    root = _seed(tmp_path)
    db = f"sqlite:///{tmp_path / 'cli.sqlite'}"

    assert main(["--db", db, "ingest", "--order", "3", "--author", "test", str(root / "fox.txt")]) == 0
    assert "observations=6" in capsys.readouterr().out

    assert main(["--db", db, "generate", "The", "quick"]) == 0
    assert capsys.readouterr().out == FOX + "\n"

    assert main(["--db", db, "search", "fox", "--json"]) == 0
    out = capsys.readouterr().out
    assert '"tuple": "brown fox jumps"' in out

    assert main(["--db", db, "stats"]) == 0
    assert capsys.readouterr().out.strip() == "prefixes=6 suffixes=6"


@pytest.mark.e2e
def test_cli_reports_no_match(tmp_path: Path, capsys):
    db = f"sqlite:///{tmp_path / 'empty.sqlite'}"
    assert main(["--db", db, "generate", "nothing"]) == 1
    assert "no prefixes match" in capsys.readouterr().err


@pytest.mark.e2e
def test_cli_reports_malformed_line(tmp_path: Path, capsys):
    f = tmp_path / "bad.txt"
    f.write_text("alice hello there\nbob\n", encoding="utf-8")
    assert main(["--db", "memory://", "ingest", str(f)]) == 1
    assert "line 2" in capsys.readouterr().err


def test_verbose_open_leaves_the_environment_alone(monkeypatch):
    monkeypatch.delenv("MARKOV_VERBOSE", raising=False)
    eng = Engine().open("memory://", verbose=True)
    try:
        assert "MARKOV_VERBOSE" not in os.environ
    finally:
        eng.shutdown()
