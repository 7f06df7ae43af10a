"""Mapping from (institution, masked account identifier) to internal account ids.

Mappings are deactivated rather than deleted to keep an audit trail. At most one
active mapping exists per (institution, identifier) pair.
"""

from __future__ import annotations

import threading

import structlog

from sms_extractor.models import AccountMapping

logger = structlog.get_logger()


def _same_pair(mapping: AccountMapping, institution: str, identifier: str) -> bool:
    return (
        mapping.institution.casefold() == institution.casefold()
        and mapping.account_identifier == identifier
    )


class AccountMappingService:
    """Thread-safe in-memory account mapping store."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._mappings: dict[int, AccountMapping] = {}
        self._next_id = 1

    def create_mapping(self, account_id: int, institution: str, identifier: str) -> AccountMapping:
        """Link an identifier to an account.

        Returns the existing mapping when an active one already links the same
        pair to the same account. An active mapping linking the pair to a
        different account is deactivated first.
        """
        with self._lock:
            for mapping in self._mappings.values():
                if mapping.is_active and _same_pair(mapping, institution, identifier):
                    if mapping.account_id == account_id:
                        return mapping
                    self._mappings[mapping.id] = mapping.model_copy(update={"is_active": False})
                    logger.info(
                        "account_mapping_superseded",
                        mapping_id=mapping.id,
                        previous_account_id=mapping.account_id,
                        account_id=account_id,
                    )
                    break

            mapping = AccountMapping(
                id=self._next_id,
                account_id=account_id,
                institution=institution,
                account_identifier=identifier,
            )
            self._mappings[mapping.id] = mapping
            self._next_id += 1

        logger.info(
            "account_mapping_created",
            mapping_id=mapping.id,
            account_id=account_id,
            institution=institution,
        )
        return mapping

    def find_account(self, institution: str, identifier: str) -> int | None:
        """Return the account id for an active mapping of the pair, if any."""
        with self._lock:
            for mapping in self._mappings.values():
                if mapping.is_active and _same_pair(mapping, institution, identifier):
                    return mapping.account_id
        return None

    def get(self, mapping_id: int) -> AccountMapping | None:
        with self._lock:
            return self._mappings.get(mapping_id)

    def all(self) -> list[AccountMapping]:
        with self._lock:
            return list(self._mappings.values())

    def mappings_for_account(self, account_id: int) -> list[AccountMapping]:
        with self._lock:
            return [m for m in self._mappings.values() if m.account_id == account_id]

    def activate(self, mapping_id: int) -> bool:
        """Re-activate a mapping, deactivating any other active mapping on its pair."""
        with self._lock:
            mapping = self._mappings.get(mapping_id)
            if mapping is None:
                return False
            for other in list(self._mappings.values()):
                if (
                    other.id != mapping_id
                    and other.is_active
                    and _same_pair(other, mapping.institution, mapping.account_identifier)
                ):
                    self._mappings[other.id] = other.model_copy(update={"is_active": False})
            self._mappings[mapping_id] = mapping.model_copy(update={"is_active": True})
        logger.info("account_mapping_activated", mapping_id=mapping_id)
        return True

    def deactivate(self, mapping_id: int) -> bool:
        with self._lock:
            mapping = self._mappings.get(mapping_id)
            if mapping is None:
                return False
            self._mappings[mapping_id] = mapping.model_copy(update={"is_active": False})
        logger.info("account_mapping_deactivated", mapping_id=mapping_id)
        return True

    def delete(self, mapping_id: int) -> bool:
        with self._lock:
            removed = self._mappings.pop(mapping_id, None)
        return removed is not None
