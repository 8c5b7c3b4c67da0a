import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def classic_freqs():
    """The textbook a-f frequency table."""
    return {'a': 5, 'b': 9, 'c': 12, 'd': 13, 'e': 16, 'f': 45}


@pytest.fixture()
def sample_text():
    return "She sells sea shells\nby the sea shore.\r\n\tEnd\x00\xff"


@pytest.fixture()
def text_file(tmp_path: Path, sample_text):
    """Write ``sample_text`` as latin-1 without newline translation."""
    path = tmp_path / "input.txt"
    path.write_bytes(sample_text.encode("latin-1"))
    return path
