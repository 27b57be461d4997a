"""
Test suite for the command-line entry point
"""

import json
import logging
import pytest

from payment_ledger.__main__ import main


INPUT = (
    "type,client,tx,amount\n"
    "deposit,1,1,10.0\n"
    "withdrawal,1,2,15.0\n"
    "deposit,2,3,2.0\n"
    "withdrawal,2,3,1.0\n"
    "withdrawal,2,3,1.0\n"
    "bogus,1,1\n"
)


class TestCli:
    """Test argument handling, output streams and exit codes"""

    def setup_method(self):
        self.logger = logging.getLogger("payment_ledger")

    def teardown_method(self):
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
        self.logger.propagate = True
        self.logger.setLevel(logging.NOTSET)

    @pytest.fixture
    def input_file(self, tmp_path):
        path = tmp_path / "transactions.csv"
        path.write_text(INPUT, encoding="utf-8")
        return path

    def test_balances_to_stdout(self, input_file, capsys):
        assert main([str(input_file)]) == 0

        captured = capsys.readouterr()
        assert captured.out == (
            "client,available,held,total,locked\n"
            "1,10.0000,0.0000,10.0000,false\n"
            "2,0.0000,0.0000,0.0000,false\n"
        )

    def test_diagnostics_to_stderr(self, input_file, capsys):
        main([str(input_file)])

        lines = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
        assert [entry["level"] for entry in lines] == ["WARNING", "WARNING"]
        assert lines[0]["action"] == "reject_operation"
        assert lines[0]["extra"]["error_code"] == "insufficient_funds"
        assert lines[1]["action"] == "skip_row"

    def test_output_file(self, input_file, tmp_path, capsys):
        output = tmp_path / "accounts.csv"
        assert main([str(input_file), "--output", str(output)]) == 0

        assert capsys.readouterr().out == ""
        assert output.read_text(encoding="utf-8").splitlines()[1] == "1,10.0000,0.0000,10.0000,false"

    def test_strict_ids_flag(self, input_file, capsys):
        assert main([str(input_file), "--strict-ids"]) == 0
        assert capsys.readouterr().out.splitlines()[2] == "2,2.0000,0.0000,2.0000,false"

    def test_text_log_format(self, input_file, capsys):
        main([str(input_file), "--log-format", "text", "--log-level", "info"])
        err = capsys.readouterr().err
        assert "WARNING payment_ledger.engine: Rejected withdrawal" in err
        assert "INFO payment_ledger.engine: Processing complete" in err

    def test_missing_input(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.csv")]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "missing.csv" in captured.err

    def test_bad_header(self, tmp_path, capsys):
        path = tmp_path / "bad.csv"
        path.write_text("kind,who\ndeposit,1\n", encoding="utf-8")
        assert main([str(path)]) == 1
        assert "missing columns" in capsys.readouterr().err

    def test_usage_errors(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

        with pytest.raises(SystemExit) as exc_info:
            main(["x.csv", "--log-level", "chatty"])
        assert exc_info.value.code == 2
