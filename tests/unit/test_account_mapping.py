"""Unit tests for the account mapping service."""

from sms_extractor.registry import AccountMappingService


class TestAccountMappingService:
    """Test suite for AccountMappingService."""

    def test_create_and_find(self, accounts: AccountMappingService) -> None:
        mapping = accounts.create_mapping(7, "HDFC Bank", "XXXX1234")

        assert mapping.id == 1
        assert mapping.is_active is True
        assert accounts.find_account("HDFC Bank", "XXXX1234") == 7

    def test_institution_case_insensitive_identifier_exact(
        self, accounts: AccountMappingService
    ) -> None:
        accounts.create_mapping(7, "HDFC Bank", "XXXX1234")

        assert accounts.find_account("hdfc bank", "XXXX1234") == 7
        assert accounts.find_account("HDFC Bank", "xxxx1234") is None
        assert accounts.find_account("HDFC Bank", "XXXX9999") is None

    def test_duplicate_create_returns_existing(self, accounts: AccountMappingService) -> None:
        first = accounts.create_mapping(7, "HDFC Bank", "XXXX1234")
        again = accounts.create_mapping(7, "hdfc bank", "XXXX1234")

        assert again == first
        assert len(accounts.all()) == 1

    def test_relinking_supersedes_previous_mapping(self, accounts: AccountMappingService) -> None:
        old = accounts.create_mapping(7, "HDFC Bank", "XXXX1234")
        new = accounts.create_mapping(8, "HDFC Bank", "XXXX1234")

        assert new.id != old.id
        assert accounts.get(old.id).is_active is False
        assert accounts.find_account("HDFC Bank", "XXXX1234") == 8

    def test_deactivate_hides_mapping(self, accounts: AccountMappingService) -> None:
        mapping = accounts.create_mapping(7, "HDFC Bank", "XXXX1234")

        assert accounts.deactivate(mapping.id) is True
        assert accounts.find_account("HDFC Bank", "XXXX1234") is None
        assert accounts.get(mapping.id) is not None

    def test_activate_keeps_single_active_mapping(self, accounts: AccountMappingService) -> None:
        old = accounts.create_mapping(7, "HDFC Bank", "XXXX1234")
        new = accounts.create_mapping(8, "HDFC Bank", "XXXX1234")

        assert accounts.activate(old.id) is True

        assert accounts.find_account("HDFC Bank", "XXXX1234") == 7
        assert accounts.get(new.id).is_active is False

    def test_unknown_ids(self, accounts: AccountMappingService) -> None:
        assert accounts.activate(42) is False
        assert accounts.deactivate(42) is False
        assert accounts.delete(42) is False
        assert accounts.get(42) is None

    def test_mappings_for_account_and_delete(self, accounts: AccountMappingService) -> None:
        first = accounts.create_mapping(7, "HDFC Bank", "XXXX1234")
        accounts.create_mapping(7, "ICICI Bank", "4321")
        accounts.create_mapping(8, "SBI", "XXXX0000")

        assert len(accounts.mappings_for_account(7)) == 2

        assert accounts.delete(first.id) is True
        assert [m.institution for m in accounts.mappings_for_account(7)] == ["ICICI Bank"]
