import io

import pytest


@pytest.fixture
def text_stream():
    """Build an in-memory text stream from a string."""

    def _make(text: str) -> io.StringIO:
        return io.StringIO(text)

    return _make


@pytest.fixture
def csv_file(tmp_path):
    """Write `text` to a csv file under tmp_path and return its path."""

    def _write(text: str, name: str = "data.csv"):
        path = tmp_path / name
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write
