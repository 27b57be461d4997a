"""
Operation Types

One class per kind of input record. Amount presence is part of the type:
deposits and withdrawals carry an amount, dispute lifecycle operations
refer back to a deposit by transaction id only.
"""

from decimal import Decimal
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .currency import to_amount


class OperationType(Enum):
    """Kinds of client operations"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def requires_amount(self) -> bool:
        """Check if operations of this kind carry an amount"""
        return self in (OperationType.DEPOSIT, OperationType.WITHDRAWAL)


def _check_id(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class _ClientOperation:
    client_id: int
    tx_id: int

    def __post_init__(self):
        _check_id("client_id", self.client_id)
        _check_id("tx_id", self.tx_id)


@dataclass(frozen=True)
class _FundsOperation(_ClientOperation):
    amount: Decimal

    def __post_init__(self):
        super().__post_init__()
        amount = to_amount(self.amount)
        if amount < 0:
            raise ValueError(f"amount must be non-negative, got {amount}")
        object.__setattr__(self, 'amount', amount)


@dataclass(frozen=True)
class Deposit(_FundsOperation):
    """Credit funds to a client account"""
    kind = OperationType.DEPOSIT


@dataclass(frozen=True)
class Withdrawal(_FundsOperation):
    """Debit funds from a client account"""
    kind = OperationType.WITHDRAWAL


@dataclass(frozen=True)
class Dispute(_ClientOperation):
    """Claim against a previous deposit, freezing its amount"""
    kind = OperationType.DISPUTE


@dataclass(frozen=True)
class Resolve(_ClientOperation):
    """Release the funds frozen by a dispute"""
    kind = OperationType.RESOLVE


@dataclass(frozen=True)
class Chargeback(_ClientOperation):
    """Reverse a disputed deposit and lock the account"""
    kind = OperationType.CHARGEBACK


Operation = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]

OPERATION_CLASSES = {
    OperationType.DEPOSIT: Deposit,
    OperationType.WITHDRAWAL: Withdrawal,
    OperationType.DISPUTE: Dispute,
    OperationType.RESOLVE: Resolve,
    OperationType.CHARGEBACK: Chargeback,
}
