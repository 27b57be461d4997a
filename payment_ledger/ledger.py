"""
Account Ledger Engine

Applies client operations strictly in arrival order and keeps the
per-client balances plus the registry of disputable deposits. Every
rejection raises a LedgerError before any balance or deposit record is
touched, so a failed operation has no effect beyond registering a newly
seen client.
"""

import logging
from typing import Dict, Iterator, List, Optional, Set

from .accounts import Account, AccountView, DepositRecord, DisputeState
from .currency import ZERO, balance_context, format_amount
from .errors import (
    AccountLockedError, DuplicateTransactionError, InsufficientFundsError,
    InvalidStateError, LedgerInvariantError, UnknownTransactionError
)
from .operations import (
    Chargeback, Deposit, Dispute, Operation, Resolve, Withdrawal
)
from .logging_config import get_logger, log_action


class Ledger:
    """
    Registry of client accounts and deposit records with the dispute
    state machine

    Accounts come into existence the first time a deposit or withdrawal
    names their client, even when that operation is rejected, and are
    never removed. Dispute lifecycle operations never create accounts.
    Deposit records are never removed either, so repeated references to
    a charged back deposit keep failing.
    """

    def __init__(self, strict_transaction_ids: bool = False):
        self._accounts: Dict[int, Account] = {}
        self._deposits: Dict[int, DepositRecord] = {}
        # Only populated in strict mode
        self._withdrawal_ids: Set[int] = set()
        self.strict_transaction_ids = strict_transaction_ids
        self.logger = get_logger("payment_ledger.ledger")

        self._handlers = {
            Deposit: self._apply_deposit,
            Withdrawal: self._apply_withdrawal,
            Dispute: self._apply_dispute,
            Resolve: self._apply_resolve,
            Chargeback: self._apply_chargeback,
        }

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts.values())

    def apply(self, op: Operation) -> None:
        """
        Apply one operation

        Args:
            op: Deposit, Withdrawal, Dispute, Resolve or Chargeback

        Raises:
            LedgerError: If the operation is rejected; state is unchanged
            TypeError: If op is not an operation
        """
        handler = self._handlers.get(type(op))
        if handler is None:
            raise TypeError(f"Not a ledger operation: {op!r}")

        account = handler(op)
        self._check_consistency(account)

        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        log_action(
            self.logger, "debug", f"Applied {op.kind.value}",
            action=op.kind.value, resource=f"client:{op.client_id}",
            extra={
                "client_id": op.client_id,
                "tx_id": op.tx_id,
                "available": format_amount(account.available),
                "held": format_amount(account.held),
                "locked": account.locked
            }
        )

    def snapshot(self) -> List[AccountView]:
        """One view per known client, ordered by client id"""
        return [self._accounts[client_id].view() for client_id in sorted(self._accounts)]

    def get_account(self, client_id: int) -> Optional[Account]:
        """Get account by client id"""
        return self._accounts.get(client_id)

    def get_deposit(self, tx_id: int) -> Optional[DepositRecord]:
        """Get deposit record by transaction id"""
        return self._deposits.get(tx_id)

    def _account_for(self, client_id: int) -> Account:
        account = self._accounts.get(client_id)
        if account is None:
            account = self._accounts[client_id] = Account(client_id=client_id)
        return account

    def _is_known_id(self, tx_id: int) -> bool:
        return tx_id in self._deposits or tx_id in self._withdrawal_ids

    def _apply_deposit(self, op: Deposit) -> Account:
        account = self._account_for(op.client_id)
        if account.locked:
            raise AccountLockedError(op.client_id, op.tx_id)
        if self._is_known_id(op.tx_id):
            raise DuplicateTransactionError(op.client_id, op.tx_id)

        with balance_context():
            available = account.available + op.amount

        account.available = available
        self._deposits[op.tx_id] = DepositRecord(
            tx_id=op.tx_id,
            client_id=op.client_id,
            amount=op.amount
        )
        return account

    def _apply_withdrawal(self, op: Withdrawal) -> Account:
        account = self._account_for(op.client_id)
        if account.locked:
            raise AccountLockedError(op.client_id, op.tx_id)
        if self.strict_transaction_ids and self._is_known_id(op.tx_id):
            raise DuplicateTransactionError(op.client_id, op.tx_id)
        if account.available < op.amount:
            raise InsufficientFundsError(
                op.client_id, op.tx_id,
                requested=format_amount(op.amount),
                available=format_amount(account.available)
            )

        with balance_context():
            available = account.available - op.amount

        account.available = available
        if self.strict_transaction_ids:
            self._withdrawal_ids.add(op.tx_id)
        return account

    def _disputable(self, op: Operation) -> DepositRecord:
        """
        Find the deposit a dispute lifecycle operation refers to

        Raises:
            UnknownTransactionError: No deposit, or deposit of another client
            AccountLockedError: The owning account is locked
        """
        record = self._deposits.get(op.tx_id)
        if record is None or record.client_id != op.client_id:
            raise UnknownTransactionError(op.client_id, op.tx_id)
        if self._accounts[record.client_id].locked:
            raise AccountLockedError(op.client_id, op.tx_id)
        return record

    def _apply_dispute(self, op: Dispute) -> Account:
        record = self._disputable(op)
        if record.is_disputed:
            raise InvalidStateError(op.client_id, op.tx_id, "is already under dispute")

        # May leave available negative if the funds were already withdrawn
        account = self._accounts[record.client_id]
        with balance_context():
            available = account.available - record.amount
            held = account.held + record.amount

        account.available, account.held = available, held
        record.state = DisputeState.DISPUTED
        return account

    def _apply_resolve(self, op: Resolve) -> Account:
        record = self._disputable(op)
        if not record.is_disputed:
            raise InvalidStateError(op.client_id, op.tx_id, "is not under dispute")

        account = self._accounts[record.client_id]
        with balance_context():
            held = account.held - record.amount
            available = account.available + record.amount

        account.available, account.held = available, held
        record.state = DisputeState.NORMAL
        return account

    def _apply_chargeback(self, op: Chargeback) -> Account:
        record = self._disputable(op)
        if not record.is_disputed:
            raise InvalidStateError(op.client_id, op.tx_id, "is not under dispute")

        account = self._accounts[record.client_id]
        with balance_context():
            held = account.held - record.amount

        account.held = held
        account.locked = True
        record.state = DisputeState.CHARGED_BACK
        return account

    def _check_consistency(self, account: Account) -> None:
        if account.held < ZERO:
            raise LedgerInvariantError(
                f"Account {account.client_id}: negative held balance {account.held}"
            )
