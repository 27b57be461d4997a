"""
Processing Engine

Feeds an operation stream through a Ledger in arrival order. Rejections
are reported and collected; they never stop the run.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, TextIO

from .config import LedgerConfig, get_config
from .csv_io import OperationReader, write_accounts
from .errors import LedgerError
from .ledger import Ledger
from .operations import Operation
from .logging_config import get_logger, log_action

logger = get_logger("payment_ledger.engine")


@dataclass(frozen=True)
class Rejection:
    """An operation the ledger refused, with the reason"""
    operation: Operation
    error: LedgerError

    @property
    def code(self) -> str:
        return self.error.code


@dataclass
class ProcessingReport:
    """Outcome counts of one run"""
    applied: int = 0
    skipped_rows: int = 0
    rejections: List[Rejection] = field(default_factory=list)
    accounts_written: int = 0

    @property
    def rejected(self) -> int:
        return len(self.rejections)


def process_operations(ledger: Ledger, operations: Iterable[Operation],
                       report: Optional[ProcessingReport] = None) -> ProcessingReport:
    """
    Apply operations one at a time, in order

    Args:
        ledger: Ledger receiving the operations
        operations: Operations in arrival order
        report: Report to accumulate into, a new one when omitted

    Returns:
        ProcessingReport with applied and rejected counts
    """
    if report is None:
        report = ProcessingReport()

    for op in operations:
        try:
            ledger.apply(op)
        except LedgerError as e:
            report.rejections.append(Rejection(operation=op, error=e))
            log_action(
                logger, "warning", f"Rejected {op.kind.value}: {e.message}",
                action="reject_operation", resource=f"transaction:{op.tx_id}",
                extra={
                    "operation": op.kind.value,
                    "client_id": op.client_id,
                    "tx_id": op.tx_id,
                    "error_code": e.code
                }
            )
            continue
        report.applied += 1

    return report


def process_csv(source: TextIO, sink: TextIO,
                config: Optional[LedgerConfig] = None) -> ProcessingReport:
    """
    Read operations from a CSV stream and write the final balances

    Args:
        source: CSV input with header type,client,tx,amount
        sink: Destination for client,available,held,total,locked rows
        config: Settings, the global configuration when omitted

    Returns:
        ProcessingReport of the run
    """
    config = config or get_config()
    ledger = Ledger(strict_transaction_ids=config.strict_transaction_ids)
    reader = OperationReader(source, delimiter=config.csv_delimiter)

    report = process_operations(ledger, reader)
    report.skipped_rows = reader.skipped
    report.accounts_written = write_accounts(
        ledger.snapshot(), sink, delimiter=config.csv_delimiter
    )

    log_action(
        logger, "info", "Processing complete",
        action="process_csv",
        extra={
            "applied": report.applied,
            "rejected": report.rejected,
            "skipped_rows": report.skipped_rows,
            "accounts": report.accounts_written
        }
    )
    return report
