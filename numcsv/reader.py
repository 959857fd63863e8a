"""Tolerant reader for numeric delimited text.

Accepts "from the wild" files that strict CSV parsers reject: blank lines and
comment lines before the heading, an optional trailing delimiter, and quoted
heading labels. Every data row must still hold exactly the same number of
valid floating-point fields.

Typical use:

    with open(path, "rb") as fh:
        reader = Reader(fh, comment="#")
        heading = reader.read_heading()
        matrix = reader.read_all()
"""
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Union

import numpy as np

logger = logging.getLogger(__name__)

Line = Union[str, bytes]


class ErrorKind(str, Enum):
    INPUT = "input"
    TRAILING_DELIMITER = "trailing_delimiter"
    FIELD_COUNT = "field_count"
    NUMERIC_PARSE = "numeric_parse"
    SEQUENCE = "sequence"


class ReaderState(str, Enum):
    FRESH = "fresh"
    HEADING_READ = "heading_read"
    READING = "reading"
    EXHAUSTED = "exhausted"


class NumCSVError(Exception):
    """Base class for every reader failure.

    Carries the error `kind` and the 1-based `line` number where the problem
    was found (None when no line applies).
    """

    kind: ErrorKind

    def __init__(self, message: str, line: Optional[int] = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class InputError(NumCSVError):
    kind = ErrorKind.INPUT


class TrailingDelimiterError(NumCSVError):
    kind = ErrorKind.TRAILING_DELIMITER

    def __init__(self, line: Optional[int] = None):
        super().__init__("extra delimiter at end of heading line", line)


class FieldCountError(NumCSVError):
    kind = ErrorKind.FIELD_COUNT

    def __init__(self, expected: int, actual: int, line: Optional[int] = None):
        super().__init__(f"wrong number of fields: expected {expected}, got {actual}", line)
        self.expected = expected
        self.actual = actual


class NumericParseError(NumCSVError):
    kind = ErrorKind.NUMERIC_PARSE

    def __init__(self, text: str, column: int, line: Optional[int] = None):
        super().__init__(f"cannot parse {text!r} in column {column} as a float", line)
        self.text = text
        self.column = column


class SequenceError(NumCSVError):
    kind = ErrorKind.SEQUENCE

    def __init__(self, state: ReaderState, operation: str):
        super().__init__(f"{operation}() is not allowed in state {state.value!r}")
        self.state = state
        self.operation = operation


@dataclass(frozen=True)
class ReaderOptions:
    """Reader configuration, fixed before the first read.

    Attributes:
        delimiter: field delimiter for data rows
        heading_delimiter: delimiter for the heading; falls back to `delimiter`
        allow_trailing_delimiter: accept one trailing delimiter on the heading
        comment: prefix of lines skipped while searching for the heading
        field_count: expected fields per row, 0 to infer from the first line
        skip_heading: the input has no heading row
    """

    delimiter: str = ","
    heading_delimiter: Optional[str] = None
    allow_trailing_delimiter: bool = False
    comment: str = ""
    field_count: int = 0
    skip_heading: bool = False

    def __post_init__(self):
        if not self.delimiter:
            raise ValueError("delimiter must be a non-empty string")
        if self.field_count < 0:
            raise ValueError("field_count must be >= 0")

    @property
    def effective_heading_delimiter(self) -> str:
        return self.heading_delimiter or self.delimiter


def strip_quotes(field: str) -> str:
    """Remove at most one trailing and one leading double quote."""
    if field.endswith('"'):
        field = field[:-1]
    if field.startswith('"'):
        field = field[1:]
    return field


def parse_float(text: str) -> float:
    """Parse a single numeric field.

    Python's float() also accepts padding whitespace and digit-group
    underscores, and rounds out-of-range literals such as 1e400 to inf;
    none of these is valid numeric text here.
    """
    if not text or text != text.strip() or "_" in text:
        raise ValueError(text)
    value = float(text)
    if math.isinf(value) and text.lstrip("+-").lower() not in ("inf", "infinity"):
        raise ValueError(f"{text} is out of range for a float64")
    return value


class Reader:
    """Line-by-line numeric reader over a text or binary stream.

    The reader owns its cursor but not the stream: opening and closing it is
    up to the caller. Not safe for concurrent use.
    """

    def __init__(self, stream: Iterable[Line], options: Optional[ReaderOptions] = None, **overrides):
        if options is None:
            options = ReaderOptions(**overrides)
        elif overrides:
            options = replace(options, **overrides)
        self.options = options
        self._lines = iter(stream)
        self._field_count = options.field_count
        self._state = ReaderState.READING if options.skip_heading else ReaderState.FRESH
        self._line_read = False
        self._has_trailing_delimiter = False
        self._line_number = 0

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def field_count(self) -> int:
        """Number of fields per record; 0 until configured or inferred."""
        return self._field_count

    @property
    def has_trailing_delimiter(self) -> bool:
        return self._has_trailing_delimiter

    @property
    def line_number(self) -> int:
        return self._line_number

    def _next_line(self) -> Optional[str]:
        # None at end of input
        try:
            raw = next(self._lines)
        except StopIteration:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(f"failed reading input: {e}", self._line_number + 1) from e
        self._line_number += 1
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise InputError(f"invalid UTF-8: {e}", self._line_number) from e
        if self._line_number == 1 and raw.startswith("\ufeff"):
            raw = raw[1:]
        if raw.endswith("\n"):
            raw = raw[:-1]
        if raw.endswith("\r"):
            raw = raw[:-1]
        return raw

    def read_heading(self) -> List[str]:
        """Read the heading row, skipping blank and comment lines before it.

        Returns:
            heading: one label per column, with surrounding quotes removed

        Raises:
            SequenceError: the reader is past its first line or skips headings
            InputError: the stream failed or held no heading line
            TrailingDelimiterError: trailing delimiter not allowed
            FieldCountError: label count differs from a configured field_count
        """
        if self._state is not ReaderState.FRESH:
            raise SequenceError(self._state, "read_heading")

        comment = self.options.comment
        while True:
            line = self._next_line()
            if line is None:
                raise InputError("no heading line found before end of input", self._line_number or None)
            if line == "" or (comment and line.startswith(comment)):
                logger.debug("skipping line %d before heading", self._line_number)
                continue
            break

        fields = line.split(self.options.effective_heading_delimiter)
        if fields[-1] == "":
            if not self.options.allow_trailing_delimiter:
                raise TrailingDelimiterError(self._line_number)
            self._has_trailing_delimiter = True
            fields = fields[:-1]

        if self._field_count and len(fields) != self._field_count:
            raise FieldCountError(self._field_count, len(fields), self._line_number)
        self._field_count = len(fields)
        logger.debug("heading on line %d fixes field count to %d", self._line_number, self._field_count)

        self._line_read = True
        self._state = ReaderState.HEADING_READ
        return [strip_quotes(f) for f in fields]

    def read(self) -> Optional[List[float]]:
        """Read one data record.

        Every line is data here: blank and comment lines are not skipped.
        One trailing delimiter is always tolerated.

        Returns:
            record: `field_count` floats, or None once the input is exhausted
        """
        if self._state is ReaderState.EXHAUSTED:
            return None
        if self._state is ReaderState.FRESH:
            raise SequenceError(self._state, "read")

        line = self._next_line()
        if line is None:
            logger.debug("end of input after %d lines", self._line_number)
            self._state = ReaderState.EXHAUSTED
            return None
        self._state = ReaderState.READING

        fields = line.split(self.options.delimiter)
        if fields[-1] == "":
            fields = fields[:-1]

        if not self._line_read:
            self._line_read = True
            if self._field_count == 0:
                self._field_count = len(fields)
                logger.debug("first data line fixes field count to %d", self._field_count)

        if not fields or len(fields) != self._field_count:
            raise FieldCountError(self._field_count, len(fields), self._line_number)

        record = []
        for column, text in enumerate(fields):
            try:
                record.append(parse_float(text))
            except ValueError:
                raise NumericParseError(text, column, self._line_number) from None
        return record

    def __iter__(self) -> Iterator[List[float]]:
        while True:
            record = self.read()
            if record is None:
                return
            yield record

    def read_all(self) -> np.ndarray:
        """Read every remaining record into a (rows, field_count) float64 array."""
        records = list(self)
        if not records:
            return np.empty((0, self._field_count), dtype=float)
        return np.array(records, dtype=float)
