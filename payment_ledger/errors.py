"""
Ledger Rejection Errors

Every LedgerError is local to one operation: balances and deposit records
are left exactly as they were and processing continues with the next
operation
"""

from typing import Optional


class LedgerError(Exception):
    """Base class for recoverable, per-operation rejections"""

    code = "ledger_error"

    def __init__(
        self,
        message: str,
        client_id: Optional[int] = None,
        tx_id: Optional[int] = None,
    ) -> None:
        self.message = message
        self.client_id = client_id
        self.tx_id = tx_id
        super().__init__(message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LedgerError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.message == other.message
            and self.client_id == other.client_id
            and self.tx_id == other.tx_id
        )

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.client_id, self.tx_id))


class AccountLockedError(LedgerError):
    code = "account_locked"

    def __init__(self, client_id: int, tx_id: int) -> None:
        super().__init__(f"Account {client_id} is locked", client_id, tx_id)


class InsufficientFundsError(LedgerError):
    code = "insufficient_funds"

    def __init__(self, client_id: int, tx_id: int, requested: str, available: str) -> None:
        super().__init__(
            f"Insufficient funds: requested {requested}, available {available}",
            client_id,
            tx_id,
        )


class DuplicateTransactionError(LedgerError):
    code = "duplicate_transaction"

    def __init__(self, client_id: int, tx_id: int) -> None:
        super().__init__(f"Transaction {tx_id} already exists", client_id, tx_id)


class UnknownTransactionError(LedgerError):
    code = "unknown_transaction"

    def __init__(self, client_id: int, tx_id: int) -> None:
        super().__init__(
            f"Transaction {tx_id} not found for client {client_id}", client_id, tx_id
        )


class InvalidStateError(LedgerError):
    code = "invalid_state"

    def __init__(self, client_id: int, tx_id: int, reason: str) -> None:
        super().__init__(f"Transaction {tx_id} {reason}", client_id, tx_id)


class LedgerInvariantError(Exception):
    """
    Raised when an account is left with a negative held balance

    Indicates a bug in the ledger, never a bad input
    """
