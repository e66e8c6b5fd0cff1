"""
Calculation history for the calculator engine.

Holds the immutable record of each completed computation and the
append-only log the presentation layers render.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Union


def format_number(value: float) -> str:
    """Canonical text form of a numeric value (``8.0``, ``0.5``, ``1e+16``)."""
    return repr(float(value))


@dataclass(frozen=True)
class HistoryRecord:
    """One completed computation."""

    left_operand: float
    symbol: str
    right_operand: float
    result: str

    def as_text(self) -> str:
        """
        Render the record the way the history panel shows it.

        Returns:
            A line such as ``5.0 + 3.0 = 8.0``
        """
        return (
            f"{format_number(self.left_operand)} {self.symbol} "
            f"{format_number(self.right_operand)} = {self.result}"
        )

    def to_dict(self) -> Dict[str, Union[float, str]]:
        return {
            "left_operand": self.left_operand,
            "symbol": self.symbol,
            "right_operand": self.right_operand,
            "result": self.result,
            "text": self.as_text(),
        }


class HistoryLog:
    """Append-only, chronologically ordered sequence of history records."""

    def __init__(self):
        self._records: List[HistoryRecord] = []

    def append(self, record: HistoryRecord) -> None:
        self._records.append(record)

    def entries(self) -> Tuple[HistoryRecord, ...]:
        return tuple(self._records)

    def lines(self) -> List[str]:
        return [r.as_text() for r in self._records]

    def last(self) -> Optional[HistoryRecord]:
        if self._records:
            return self._records[-1]
        return None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[HistoryRecord]:
        return iter(tuple(self._records))

    def __getitem__(self, index: int) -> HistoryRecord:
        return self._records[index]


__all__ = ["HistoryLog", "HistoryRecord", "format_number"]
