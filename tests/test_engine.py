"""
Test suite for the processing engine

End-to-end runs from CSV input to balance output.
"""

import io
import logging
from decimal import Decimal

from payment_ledger.config import LedgerConfig
from payment_ledger.engine import process_csv, process_operations, ProcessingReport
from payment_ledger.errors import InsufficientFundsError, UnknownTransactionError
from payment_ledger.ledger import Ledger
from payment_ledger.operations import Deposit, Withdrawal, Dispute


class TestProcessOperations:
    """Test feeding operations through a ledger"""

    def setup_method(self):
        self.ledger = Ledger()

    def test_counts_applied_and_rejected(self):
        report = process_operations(self.ledger, [
            Deposit(1, 1, Decimal('10')),
            Withdrawal(1, 2, Decimal('15')),
            Dispute(1, 99),
            Dispute(1, 1),
        ])

        assert report.applied == 2
        assert report.rejected == 2
        assert [rejection.code for rejection in report.rejections] == [
            "insufficient_funds", "unknown_transaction"
        ]
        assert isinstance(report.rejections[0].error, InsufficientFundsError)
        assert isinstance(report.rejections[1].error, UnknownTransactionError)
        assert report.rejections[0].operation == Withdrawal(1, 2, Decimal('15'))

        account = self.ledger.get_account(1)
        assert (account.available, account.held) == (Decimal('0'), Decimal('10'))

    def test_rejections_are_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="payment_ledger"):
            process_operations(self.ledger, [Withdrawal(3, 5, Decimal('1'))])

        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.levelname == "WARNING"
        assert "Rejected withdrawal" in record.getMessage()
        assert record.extra == {
            "operation": "withdrawal",
            "client_id": 3,
            "tx_id": 5,
            "error_code": "insufficient_funds"
        }

    def test_accumulates_into_existing_report(self):
        report = ProcessingReport(applied=3)
        process_operations(self.ledger, [Deposit(1, 1, Decimal('1'))], report)
        assert report.applied == 4


class TestProcessCsv:
    """Test complete CSV runs"""

    def run(self, text, config=None):
        sink = io.StringIO()
        report = process_csv(io.StringIO(text), sink, config or LedgerConfig())
        return sink.getvalue(), report

    def test_mixed_input(self):
        output, report = self.run(
            "type,client,tx,amount\n"
            "deposit,1,1,1.0\n"
            "deposit,2,2,2.0\n"
            "deposit,1,3,2.0\n"
            "withdrawal,1,4,1.5\n"
            "withdrawal,2,5,3.0\n"
            "deposit,3,6,5.0\n"
            "deposit,3,7,1.017\n"
            "dispute,3,7\n"
            "resolve,3,7\n"
            "chargeback,3,7\n"
            "dispute,3,7\n"
            "deposit,4,8,3.0\n"
            "deposit,4,9,4.0\n"
            "dispute,4,8\n"
            "charge\n"
            "chargeback,\n"
            "chargeback,4\n"
            "chargeback,4,\n"
            "chargeback,4,8\n"
        )

        assert output == (
            "client,available,held,total,locked\n"
            "1,1.5000,0.0000,1.5000,false\n"
            "2,2.0000,0.0000,2.0000,false\n"
            "3,5.0000,1.0170,6.0170,false\n"
            "4,4.0000,0.0000,4.0000,true\n"
        )
        assert report.skipped_rows == 4
        assert report.rejected == 2
        assert report.applied == 13
        assert report.accounts_written == 4

    def test_chargeback_scenario(self):
        output, report = self.run(
            "type,client,tx,amount\n"
            "deposit,1,1,10.0\n"
            "dispute,1,1,\n"
            "chargeback,1,1,\n"
            "deposit,1,3,5.0\n"
        )
        assert output.splitlines()[1] == "1,0.0000,0.0000,0.0000,true"
        assert [rejection.code for rejection in report.rejections] == ["account_locked"]

    def test_unknown_dispute_creates_no_account(self):
        output, report = self.run("type,client,tx,amount\ndispute,1,99,\n")
        assert output == "client,available,held,total,locked\n"
        assert report.rejections[0].code == "unknown_transaction"

    def test_rejected_withdrawal_lists_new_client(self):
        output, report = self.run("type,client,tx,amount\nwithdrawal,5,1,3.0\n")
        assert output.splitlines()[1:] == ["5,0.0000,0.0000,0.0000,false"]
        assert report.rejections[0].code == "insufficient_funds"

    def test_oversized_amounts_skipped(self):
        output, report = self.run(
            "type,client,tx,amount\n"
            "deposit,1,1,999999999999999999999999.9999\n"
            "deposit,1,2,999999999999999999999999.9999\n"
            "deposit,2,3,1.5\n"
        )
        assert output.splitlines()[1:] == ["2,1.5000,0.0000,1.5000,false"]
        assert report.skipped_rows == 2
        assert report.applied == 1

    def test_strict_ids_from_config(self):
        text = (
            "type,client,tx,amount\n"
            "deposit,1,1,5\n"
            "withdrawal,1,2,1\n"
            "withdrawal,1,2,1\n"
        )
        output, _ = self.run(text)
        assert output.splitlines()[1] == "1,3.0000,0.0000,3.0000,false"

        output, report = self.run(text, LedgerConfig(strict_transaction_ids=True))
        assert output.splitlines()[1] == "1,4.0000,0.0000,4.0000,false"
        assert report.rejections[0].code == "duplicate_transaction"

    def test_delimiter_from_config(self):
        output, _ = self.run(
            "type;client;tx;amount\ndeposit;1;1;2\n",
            LedgerConfig(csv_delimiter=";")
        )
        assert output == (
            "client;available;held;total;locked\n"
            "1;2.0000;0.0000;2.0000;false\n"
        )
