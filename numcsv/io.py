"""I/O utilities for loading numeric CSV files from disk.

The reader itself works on any line stream and never opens or closes files;
these helpers own the file handle for the common path-based case. Files are
opened in binary mode so the reader handles decoding and line endings.
"""
from __future__ import annotations
import logging
import os
import typing as _t
import numpy as np

from numcsv.reader import Reader, ReaderOptions

logger = logging.getLogger(__name__)

PathLike = _t.Union[str, "os.PathLike[str]"]


def load_numeric_csv(
    path: PathLike,
    options: _t.Optional[ReaderOptions] = None,
    **overrides,
) -> _t.Tuple[_t.Optional[_t.List[str]], np.ndarray]:
    """Load a numeric CSV file into a float64 matrix.

    The heading is read first unless the options skip it. Reader errors
    propagate unchanged; no partial matrix is returned.

    Returns:
        heading: column labels, or None when `skip_heading` is set
        arr: np.ndarray shape (rows, field_count)
    """
    with open(path, "rb") as f:
        reader = Reader(f, options, **overrides)
        heading = None
        if not reader.options.skip_heading:
            heading = reader.read_heading()
        arr = reader.read_all()
    logger.info("loaded %s: %d rows x %d columns", path, arr.shape[0], arr.shape[1])
    return heading, arr


def iter_records(
    path: PathLike,
    options: _t.Optional[ReaderOptions] = None,
    **overrides,
) -> _t.Iterator[_t.List[float]]:
    """Yield the data records of a file one at a time, skipping its heading."""
    with open(path, "rb") as f:
        reader = Reader(f, options, **overrides)
        if not reader.options.skip_heading:
            reader.read_heading()
        yield from reader


if __name__ == "__main__":
    # quick manual test
    import sys
    if len(sys.argv) > 1:
        heading, arr = load_numeric_csv(sys.argv[1])
        print(f"Loaded {arr.shape[0]} rows, columns: {heading}")
