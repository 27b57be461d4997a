"""
Account Module

Client accounts, the deposit records that disputes refer back to, and
the immutable views produced for the final balance snapshot.
"""

from decimal import Decimal
from dataclasses import dataclass, field
from typing import Dict
from enum import Enum

from .currency import ZERO, format_amount


class DisputeState(Enum):
    """Dispute lifecycle of a deposit"""
    NORMAL = "normal"              # Not under dispute
    DISPUTED = "disputed"          # Amount frozen in held funds
    CHARGED_BACK = "charged_back"  # Reversed, account locked


@dataclass
class DepositRecord:
    """
    Deposit remembered by transaction id so later dispute lifecycle
    operations can find its owner and amount
    """
    tx_id: int
    client_id: int
    amount: Decimal
    state: DisputeState = DisputeState.NORMAL

    @property
    def is_disputed(self) -> bool:
        return self.state == DisputeState.DISPUTED


@dataclass
class Account:
    """
    Client account. Total is always derived from available + held.
    """
    client_id: int
    available: Decimal = field(default=ZERO)
    held: Decimal = field(default=ZERO)
    locked: bool = False

    @property
    def total(self) -> Decimal:
        """Total funds: available plus held"""
        return self.available + self.held

    def view(self) -> 'AccountView':
        """Project the account into an immutable snapshot"""
        return AccountView(
            client_id=self.client_id,
            available=self.available,
            held=self.held,
            total=self.available + self.held,
            locked=self.locked
        )


@dataclass(frozen=True)
class AccountView:
    """Snapshot of one account as handed to the output writer"""
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool

    def to_row(self) -> Dict[str, str]:
        """Render for CSV output"""
        return {
            "client": str(self.client_id),
            "available": format_amount(self.available),
            "held": format_amount(self.held),
            "total": format_amount(self.available + self.held),
            "locked": "true" if self.locked else "false",
        }
