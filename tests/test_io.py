"""Tests for the path-level loaders."""

import numpy as np
import pytest
from numcsv.io import iter_records, load_numeric_csv
from numcsv.reader import FieldCountError, ReaderOptions, TrailingDelimiterError


def test_load_numeric_csv_with_heading(csv_file):
    path = csv_file('# exported by logger\n"t","v",\n0,1.5\n1,2.5,\n')

    heading, arr = load_numeric_csv(path, comment="#", allow_trailing_delimiter=True)

    assert heading == ["t", "v"]
    np.testing.assert_array_equal(arr, [[0.0, 1.5], [1.0, 2.5]])


def test_load_numeric_csv_without_heading(csv_file):
    path = csv_file("1\t2\t3\n4\t5\t6\n")

    heading, arr = load_numeric_csv(path, ReaderOptions(delimiter="\t", skip_heading=True))

    assert heading is None
    assert arr.shape == (2, 3)


def test_load_numeric_csv_windows_line_endings(csv_file):
    path = csv_file("a,b\r\n1,2\r\n")

    heading, arr = load_numeric_csv(path)

    assert heading == ["a", "b"]
    np.testing.assert_array_equal(arr, [[1.0, 2.0]])


def test_load_numeric_csv_propagates_reader_errors(csv_file):
    with pytest.raises(TrailingDelimiterError):
        load_numeric_csv(csv_file("a,b,\n1,2\n"))
    with pytest.raises(FieldCountError):
        load_numeric_csv(csv_file("a,b\n1,2\n3,4,5\n", name="ragged.csv"))


def test_load_numeric_csv_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_numeric_csv(tmp_path / "missing.csv")


def test_iter_records(csv_file):
    path = csv_file("x,y\n1,2\n3,4\n")

    assert list(iter_records(path)) == [[1.0, 2.0], [3.0, 4.0]]


def test_iter_records_without_heading(csv_file):
    path = csv_file("1;2\n")

    assert list(iter_records(path, delimiter=";", skip_heading=True)) == [[1.0, 2.0]]
