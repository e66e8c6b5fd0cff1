"""
Four-function calculator engine with Flask and command line front-ends.
"""

from .engine import (
    ERROR_MARKER,
    ArithmeticOverflow,
    CalculatorEngine,
    CalculatorError,
    DivisionByZero,
    InvalidToken,
    MissingOperation,
    Operation,
    ParseFailure,
    parse_number,
)
from .history import HistoryLog, HistoryRecord, format_number

__version__ = "0.1.0"

__all__ = [
    "ArithmeticOverflow",
    "CalculatorEngine",
    "CalculatorError",
    "DivisionByZero",
    "ERROR_MARKER",
    "HistoryLog",
    "HistoryRecord",
    "InvalidToken",
    "MissingOperation",
    "Operation",
    "ParseFailure",
    "format_number",
    "parse_number",
]
