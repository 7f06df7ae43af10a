"""Unit tests for the command-line interface."""

import json
from pathlib import Path

import pytest
import structlog

from sms_extractor.cli import load_messages, main
from sms_extractor.exceptions import ValidationError


@pytest.fixture(autouse=True)
def reset_logging():
    """main() configures structlog against the captured stderr; undo it afterwards."""
    yield
    structlog.reset_defaults()


def _write_messages(path: Path, *messages: dict) -> Path:
    path.write_text("\n".join(json.dumps(m) for m in messages) + "\n", encoding="utf-8")
    return path


class TestExtractCommand:
    """Test suite for the extract command."""

    def test_extract_success(self, capsys, hdfc_debit_body) -> None:
        code = main(
            [
                "extract",
                "--sender",
                "VK-HDFCBK",
                "--body",
                hdfc_debit_body,
                "--timestamp",
                "2024-01-15T14:31:00",
            ]
        )

        out = capsys.readouterr().out
        assert code == 0
        assert '"kind": "expense"' in out
        assert '"merchant": "AMAZON"' in out
        assert "Disposition: auto_accept" in out

    def test_extract_failure(self, capsys) -> None:
        code = main(["extract", "--sender", "FRIEND", "--body", "See you at 7"])

        out = capsys.readouterr().out
        assert code == 1
        assert '"kind": "non_financial"' in out
        assert "Disposition: rejected" in out


class TestBatchCommand:
    """Test suite for the batch command."""

    def test_batch(self, tmp_path: Path, capsys, hdfc_debit_body) -> None:
        path = _write_messages(
            tmp_path / "messages.jsonl",
            {"sender": "VK-HDFCBK", "body": hdfc_debit_body, "timestamp": "2024-01-15T14:31:00"},
            {"sender": "FRIEND", "body": "See you at 7", "timestamp": "2024-01-15T15:00:00"},
        )

        code = main(["batch", str(path)])

        captured = capsys.readouterr()
        lines = captured.out.strip().splitlines()
        assert code == 0
        assert [json.loads(line)["status"] for line in lines] == ["success", "failure"]
        assert "Processed 2 messages: 1 accepted, 0 need review, 1 rejected" in captured.err

    def test_batch_invalid_line(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "messages.jsonl"
        path.write_text('{"sender": "VK-HDFCBK"}\n', encoding="utf-8")

        assert main(["batch", str(path)]) == 2

    def test_load_messages_skips_blank_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "messages.jsonl"
        path.write_text(
            '\n{"sender": "A", "body": "b", "timestamp": "2024-01-01T00:00:00"}\n\n',
            encoding="utf-8",
        )

        messages = load_messages(path)

        assert len(messages) == 1
        assert messages[0].sender == "A"

    def test_load_messages_reports_line(self, tmp_path: Path) -> None:
        path = tmp_path / "messages.jsonl"
        path.write_text('{"sender": "A", "body": "b", "timestamp": "2024-01-01T00:00:00"}\nnope\n')

        with pytest.raises(ValidationError, match=":2:"):
            load_messages(path)


class TestPatternsCommand:
    """Test suite for the patterns command."""

    def test_lists_builtin_patterns(self, capsys) -> None:
        code = main(["patterns"])

        out = capsys.readouterr().out
        assert code == 0
        assert "1\tactive\tHDFC Bank\tHDFC" in out
        assert len(out.strip().splitlines()) == 8

    def test_extra_patterns_file(self, tmp_path: Path, capsys) -> None:
        path = tmp_path / "patterns.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "institution": "Broken Bank",
                        "sender_pattern": "BRKN",
                        "amount_pattern": "(",
                        "merchant_pattern": r"at (\w+)",
                        "date_pattern": r"(\d{2}-\d{2}-\d{4})",
                        "type_pattern": "(debited)",
                    }
                ]
            )
        )

        code = main(["--patterns", str(path), "patterns"])

        out = capsys.readouterr().out
        assert code == 0
        assert "9\tactive\tBroken Bank\tBRKN\tINVALID: amount" in out

    def test_missing_patterns_file(self, tmp_path: Path) -> None:
        assert main(["--patterns", str(tmp_path / "missing.json"), "patterns"]) == 2
