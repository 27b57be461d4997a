"""
CSV reading and writing

Rows are validated into operations before they reach the ledger; rows
that fail validation are logged and skipped.
"""

import csv
from typing import Iterable, Iterator, List, Optional, TextIO

from pydantic import ValidationError

from .accounts import AccountView
from .operations import Operation
from .schemas import OperationRecord
from .logging_config import get_logger, log_action

INPUT_FIELDS = ["type", "client", "tx", "amount"]
OUTPUT_FIELDS = ["client", "available", "held", "total", "locked"]


class OperationReader:
    """
    Iterates the operations of a CSV stream in file order

    The first row is the header. Fields are trimmed and rows may stop
    short of the header width (dispute lifecycle rows often omit the
    amount column).
    """

    def __init__(self, stream: TextIO, delimiter: str = ","):
        self.stream = stream
        self.delimiter = delimiter
        self.skipped = 0
        self.logger = get_logger("payment_ledger.csv_io")

    def __iter__(self) -> Iterator[Operation]:
        rows = csv.reader(self.stream, delimiter=self.delimiter)
        header = self._read_header(rows)
        if header is None:
            return

        for row in rows:
            if not any(value.strip() for value in row):
                continue
            line = rows.line_num
            if len(row) > len(header):
                self._skip(line, row, f"expected at most {len(header)} fields, got {len(row)}")
                continue
            data = {
                name: value.strip()
                for name, value in zip(header, row)
                if name in INPUT_FIELDS
            }
            try:
                record = OperationRecord.model_validate(data)
            except ValidationError as e:
                self._skip(line, row, self._describe(e))
                continue
            yield record.to_operation()

    def _read_header(self, rows) -> Optional[List[str]]:
        for row in rows:
            if any(value.strip() for value in row):
                header = [value.strip().lower() for value in row]
                missing = [name for name in INPUT_FIELDS[:3] if name not in header]
                if missing:
                    raise ValueError(f"CSV header is missing columns: {', '.join(missing)}")
                return header
        return None

    def _skip(self, line: int, row: List[str], reason: str) -> None:
        self.skipped += 1
        log_action(
            self.logger, "warning", f"Skipping malformed row at line {line}: {reason}",
            action="skip_row", resource=f"line:{line}",
            extra={"line": line, "row": row, "reason": reason}
        )

    @staticmethod
    def _describe(error: ValidationError) -> str:
        parts = []
        for item in error.errors():
            location = ".".join(str(part) for part in item["loc"])
            parts.append(f"{location}: {item['msg']}" if location else item["msg"])
        return "; ".join(parts)


def read_operations(stream: TextIO, delimiter: str = ",") -> Iterator[Operation]:
    """Yield the valid operations of a CSV stream"""
    return iter(OperationReader(stream, delimiter))


def write_accounts(views: Iterable[AccountView], stream: TextIO, delimiter: str = ",") -> int:
    """
    Write account snapshots as CSV

    Returns:
        Number of account rows written
    """
    writer = csv.DictWriter(
        stream, fieldnames=OUTPUT_FIELDS, delimiter=delimiter, lineterminator="\n"
    )
    writer.writeheader()
    count = 0
    for view in views:
        writer.writerow(view.to_row())
        count += 1
    stream.flush()
    return count
