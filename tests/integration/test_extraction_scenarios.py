"""End-to-end extraction tests against the built-in institution patterns."""

from datetime import datetime
from decimal import Decimal

import pytest

from sms_extractor.models import ExtractionSuccess, FailureKind, TransactionKind
from sms_extractor.pipeline import BatchProcessor


@pytest.mark.integration
class TestExtractionScenarios:
    """Full pipeline runs for realistic bank and wallet alerts."""

    def test_bank_debit(self, orchestrator, make_message, hdfc_debit_body) -> None:
        result = orchestrator.extract(make_message("VK-HDFCBK", hdfc_debit_body))

        assert isinstance(result, ExtractionSuccess)
        tx = result.transaction
        assert tx.amount == Decimal("1500.00")
        assert tx.kind is TransactionKind.EXPENSE
        assert tx.merchant == "AMAZON"
        assert tx.timestamp == datetime(2024, 1, 15, 14, 30, 25)
        assert tx.account_identifier == "XXXX1234"
        assert result.confidence >= 0.9

    def test_bank_credit(self, orchestrator, make_message, hdfc_credit_body) -> None:
        result = orchestrator.extract(make_message("VK-HDFCBK", hdfc_credit_body))

        tx = result.transaction
        assert tx.amount == Decimal("2000.00")
        assert tx.kind is TransactionKind.INCOME
        assert tx.merchant == "SALARY"
        assert tx.timestamp == datetime(2024, 2, 1)
        assert tx.account_identifier == "XXXX5678"

    def test_non_financial(self, orchestrator, make_message) -> None:
        result = orchestrator.extract(
            make_message("VK-HDFCBK", "Your OTP for login is 482913. Do not share it.")
        )

        assert result.kind is FailureKind.NON_FINANCIAL
        assert result.confidence == 0.0

    def test_non_financial_from_unknown_sender(self, orchestrator, make_message) -> None:
        result = orchestrator.extract(make_message("RANDOM123", "Hey, are we still meeting for lunch?"))

        assert result.kind is FailureKind.NON_FINANCIAL
        assert result.confidence == 0.0
        assert result.diagnostics is None

    def test_two_digit_year_with_time(self, orchestrator, make_message) -> None:
        body = "Rs 2,500 debited from A/c XXXX9876 at GROCERY STORE on 28/01/24 16:45"

        result = orchestrator.extract(make_message("BP-SBIINB", body))

        tx = result.transaction
        assert result.diagnostics.pattern.institution == "State Bank of India"
        assert tx.amount == Decimal("2500")
        assert tx.merchant == "GROCERY STORE"
        assert tx.timestamp == datetime(2024, 1, 28, 16, 45)

    def test_wallet_payment(self, orchestrator, make_message) -> None:
        body = "You paid Rs.299 to NETFLIX via UPI on 15-02-2024"

        result = orchestrator.extract(make_message("VM-PHONPE", body))

        tx = result.transaction
        assert result.diagnostics.pattern.institution == "PhonePe"
        assert tx.kind is TransactionKind.EXPENSE
        assert tx.merchant == "NETFLIX"
        assert tx.account_identifier is None
        assert result.confidence >= 0.6

    def test_outgoing_transfer(self, orchestrator, make_message) -> None:
        body = "Rs.5000.00 transferred to A/c XXXX4321 via NEFT on 10-03-2024"

        result = orchestrator.extract(make_message("VK-HDFCBK", body))

        tx = result.transaction
        assert tx.kind is TransactionKind.TRANSFER_OUT
        assert tx.merchant == "Unknown Merchant"
        assert tx.account_identifier == "XXXX4321"
        assert tx.timestamp == datetime(2024, 3, 10)

    def test_incoming_transfer(self, orchestrator, make_message) -> None:
        body = "Rs.3000.00 received via transfer from RAHUL on 05-03-2024"

        result = orchestrator.extract(make_message("VK-HDFCBK", body))

        assert result.transaction.kind is TransactionKind.TRANSFER_IN
        assert result.transaction.merchant == "RAHUL"

    def test_mapped_account(self, orchestrator, accounts, make_message, hdfc_credit_body) -> None:
        accounts.create_mapping(3, "HDFC Bank", "XXXX5678")

        result = orchestrator.extract(make_message("VK-HDFCBK", hdfc_credit_body))

        assert result.transaction.account_id == 3

    @pytest.mark.asyncio
    async def test_batch_through_real_pipeline(
        self, orchestrator, mock_settings, make_message, hdfc_debit_body, hdfc_credit_body
    ) -> None:
        processor = BatchProcessor(orchestrator, mock_settings)
        messages = [
            make_message("VK-HDFCBK", hdfc_debit_body),
            make_message("UNKNOWN", "Rs.10 paid"),
            make_message("VK-HDFCBK", hdfc_credit_body),
            make_message("VK-HDFCBK", hdfc_debit_body),
        ]

        results = await processor.process_batch(messages)

        assert [r.is_success for r in results] == [True, False, True, True]
        assert results[0] == results[3]
        assert results[1].kind is FailureKind.UNRECOGNIZED_SENDER
        assert processor.stats().messages_processed + processor.stats().cache_hits == 4
