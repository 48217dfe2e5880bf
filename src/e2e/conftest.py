from pathlib import Path
import pytest
from markov.DB.api import make_store


def _dsn(kind: str, tmp: Path) -> str:
    return "memory://" if kind == "memory" else f"sqlite:///{tmp / 'chain.sqlite'}"


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path: Path):
    """Every store implementation behind the same contract."""
    s = make_store(_dsn(request.param, tmp_path))
    yield s
    s.close()


@pytest.fixture
def sqlite_store(tmp_path: Path):
    s = make_store(_dsn("sqlite", tmp_path))
    yield s
    s.close()
