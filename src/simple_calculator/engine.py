"""
Calculator engine.

An immediate-execution, four-function calculator:
- Digits accumulate on the display one key at a time
- An operator captures the display as the left operand
- Evaluate applies the single pending operation and records it in history
- Failures show the "Error" marker instead of raising
"""

import logging
import math
import re
from enum import Enum
from typing import Dict, Iterable, Optional, Union

from .history import HistoryLog, HistoryRecord, format_number

logger = logging.getLogger(__name__)

ERROR_MARKER = "Error"
DIGITS = frozenset("0123456789")
CLEAR_KEY = "C"
EQUALS_KEY = "="

_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class CalculatorError(Exception):
    """Base class for calculator failures."""


class ParseFailure(CalculatorError):
    """The display does not hold a valid number."""


class MissingOperation(CalculatorError):
    """Evaluate was requested with no pending operand or operator."""


class DivisionByZero(CalculatorError, ZeroDivisionError):
    """Right operand of a division is zero."""


class ArithmeticOverflow(CalculatorError, OverflowError):
    """The result is not a finite number."""


class InvalidToken(CalculatorError, ValueError):
    """A key that the calculator does not have."""


class Operation(Enum):
    """Binary operations, valued by their display symbol."""

    ADDITION = "+"
    SUBTRACTION = "−"
    MULTIPLICATION = "×"
    DIVISION = "÷"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_token(cls, token: Union["Operation", str]) -> "Operation":
        """
        Resolve a keypad token to an operation.

        Args:
            token: An Operation, an ASCII key (``+ - * /``) or a display symbol

        Raises:
            InvalidToken: If the token is not an operator key
        """
        if isinstance(token, cls):
            return token
        try:
            return _OPERATOR_TOKENS[token]
        except (KeyError, TypeError):
            raise InvalidToken(f"Unknown operator: {token!r}") from None

    def apply(self, left: float, right: float) -> float:
        """
        Perform the operation.

        Raises:
            DivisionByZero: If dividing by zero
            ArithmeticOverflow: If the result is infinite or NaN
        """
        if self is Operation.DIVISION and right == 0:
            raise DivisionByZero(f"Cannot divide {format_number(left)} by zero")

        operations = {
            Operation.ADDITION: lambda x, y: x + y,
            Operation.SUBTRACTION: lambda x, y: x - y,
            Operation.MULTIPLICATION: lambda x, y: x * y,
            Operation.DIVISION: lambda x, y: x / y,
        }
        result = operations[self](left, right)

        if not math.isfinite(result):
            raise ArithmeticOverflow("Result too large")
        return result


_OPERATOR_TOKENS: Dict[str, Operation] = {
    "+": Operation.ADDITION,
    "-": Operation.SUBTRACTION,
    "*": Operation.MULTIPLICATION,
    "/": Operation.DIVISION,
}
_OPERATOR_TOKENS.update({op.symbol: op for op in Operation})

OPERATOR_KEYS = frozenset(_OPERATOR_TOKENS)


def parse_number(text: str) -> float:
    """
    Parse display text as a finite decimal number.

    Raises:
        ParseFailure: If the text is not a numeral or overflows to infinity
    """
    if not isinstance(text, str) or not _NUMBER_RE.fullmatch(text):
        raise ParseFailure(f"Not a number: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ParseFailure(f"Number out of range: {text!r}")
    return value


class CalculatorEngine:
    """Calculator state machine: display, one pending operation, history."""

    def __init__(self):
        """Initialize calculator with default state."""
        self.history = HistoryLog()
        self.clear()

    def clear(self) -> None:
        """Reset display and pending operation. History is kept."""
        self.display = "0"
        self.pending_operand: Optional[float] = None
        self.pending_operator: Optional[Operation] = None
        self.error: Optional[CalculatorError] = None
        # Set between an operator and the first right-hand digit
        self._awaiting_operand = False

    def submit_digit(self, token: str) -> None:
        """
        Add a digit to the display.

        Args:
            token: Single digit character (0-9)
        """
        if token not in DIGITS:
            raise InvalidToken(f"Not a digit: {token!r}")

        if self.display == "0" or self.display == ERROR_MARKER:
            self.display = token
        else:
            self.display += token
        self.error = None
        self._awaiting_operand = False

    def submit_operator(self, op: Union[Operation, str]) -> bool:
        """
        Capture the display as left operand and set the pending operation.

        A display that is not a number (the error marker) leaves the
        state untouched. An operator pressed right after another one
        only replaces the pending operator.

        Returns:
            True if the operation was captured
        """
        operation = Operation.from_token(op)
        if self._awaiting_operand:
            self.pending_operator = operation
            return True

        try:
            value = parse_number(self.display)
        except ParseFailure as exc:
            logger.debug("Ignoring operator %s: %s", operation.symbol, exc)
            return False

        self.pending_operand = value
        self.pending_operator = operation
        self.display = "0"
        self._awaiting_operand = True
        return True

    def evaluate(self) -> Optional[HistoryRecord]:
        """
        Apply the pending operation to the display value.

        Returns:
            The appended history record, or None if the calculation failed
        """
        left, operation = self.pending_operand, self.pending_operator
        self.pending_operand = None
        self.pending_operator = None
        self._awaiting_operand = False

        try:
            if left is None or operation is None:
                raise MissingOperation("No pending operation")
            right = parse_number(self.display)
            result = operation.apply(left, right)
        except CalculatorError as exc:
            logger.info("Calculation failed: %s", exc)
            self.error = exc
            self.display = ERROR_MARKER
            return None

        record = HistoryRecord(left, operation.symbol, right, format_number(result))
        self.display = record.result
        self.error = None
        self.history.append(record)
        logger.debug("Computed %s", record.as_text())
        return record

    def press(self, label: str) -> None:
        """
        Dispatch a keypad button.

        Args:
            label: ``C``, ``=``, an operator key or a digit
        """
        if label == CLEAR_KEY:
            self.clear()
        elif label == EQUALS_KEY:
            self.evaluate()
        elif label in OPERATOR_KEYS:
            self.submit_operator(label)
        elif label in DIGITS:
            self.submit_digit(label)
        else:
            raise InvalidToken(f"Unknown key: {label!r}")

    def press_sequence(self, labels: Iterable[str]) -> "CalculatorEngine":
        for label in labels:
            self.press(label)
        return self

    def snapshot(self) -> Dict:
        """JSON-ready view of the current state."""
        return {
            "display": self.display,
            "pending_operand": self.pending_operand,
            "pending_operator": self.pending_operator.symbol if self.pending_operator else None,
            "error": type(self.error).__name__ if self.error else None,
            "error_message": str(self.error) if self.error else None,
            "history": [r.to_dict() for r in self.history],
        }


__all__ = [
    "ArithmeticOverflow",
    "CalculatorEngine",
    "CalculatorError",
    "DivisionByZero",
    "ERROR_MARKER",
    "InvalidToken",
    "MissingOperation",
    "Operation",
    "ParseFailure",
    "parse_number",
]
