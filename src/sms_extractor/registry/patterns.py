"""In-memory registry of institution pattern bundles.

Bundles are kept in registration order. Sender lookup returns the first active
bundle whose sender pattern matches, so when two institutions' sender patterns
overlap the one registered first wins. This is a known limitation rather than a
specificity ranking.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pydantic
import structlog

from sms_extractor.exceptions import ConfigurationError, PatternError
from sms_extractor.models import PatternBundle
from sms_extractor.registry.builtin import default_bundles

logger = structlog.get_logger()


class PatternRegistry:
    """Registry of pattern bundles keyed by id.

    Reads take a snapshot under the lock and match outside it, so regex work
    never blocks registration.
    """

    def __init__(self, bundles: list[PatternBundle] | None = None) -> None:
        self._lock = threading.RLock()
        self._bundles: dict[int, PatternBundle] = {}
        self._next_id = 1
        for bundle in bundles or []:
            self.register(bundle)

    @classmethod
    def with_defaults(cls) -> PatternRegistry:
        """Create a registry seeded with the built-in institutions."""
        registry = cls(default_bundles())
        logger.info("pattern_registry_seeded", bundle_count=len(registry))
        return registry

    def __len__(self) -> int:
        with self._lock:
            return len(self._bundles)

    def register(self, bundle: PatternBundle, *, strict: bool = False) -> PatternBundle:
        """Store a bundle, assigning an id when it has none.

        Re-registering an existing id overwrites that bundle in place.

        Args:
            bundle: Bundle to store.
            strict: Reject bundles containing patterns that do not compile.

        Returns:
            The stored bundle (with its id).

        Raises:
            PatternError: If ``strict`` is set and a pattern is invalid.
        """
        invalid = bundle.invalid_patterns()
        if invalid:
            if strict:
                raise PatternError(
                    f"Invalid patterns for {bundle.institution}: {', '.join(invalid)}"
                )
            logger.warning(
                "pattern_bundle_has_invalid_patterns",
                institution=bundle.institution,
                fields=invalid,
            )

        with self._lock:
            if bundle.id is None:
                bundle = bundle.model_copy(update={"id": self._next_id})
            self._next_id = max(self._next_id, bundle.id + 1)
            self._bundles[bundle.id] = bundle

        logger.debug("pattern_registered", pattern_id=bundle.id, institution=bundle.institution)
        return bundle

    def update(self, bundle: PatternBundle) -> bool:
        """Replace an existing bundle. Returns False if the id is unknown."""
        with self._lock:
            if bundle.id is None or bundle.id not in self._bundles:
                return False
            self._bundles[bundle.id] = bundle
        logger.debug("pattern_updated", pattern_id=bundle.id)
        return True

    def get(self, pattern_id: int) -> PatternBundle | None:
        with self._lock:
            return self._bundles.get(pattern_id)

    def all(self) -> list[PatternBundle]:
        """All bundles, active or not, in registration order."""
        with self._lock:
            return list(self._bundles.values())

    def by_institution(self, name: str) -> list[PatternBundle]:
        """Active bundles for an institution (case-insensitive)."""
        wanted = name.casefold()
        return [b for b in self.all() if b.is_active and b.institution.casefold() == wanted]

    def find_by_sender(self, sender: str) -> PatternBundle | None:
        """Return the first active bundle whose sender pattern matches ``sender``."""
        for bundle in self.all():
            if bundle.is_active and bundle.matches_sender(sender):
                return bundle
        return None

    def activate(self, pattern_id: int) -> bool:
        return self._set_active(pattern_id, True)

    def deactivate(self, pattern_id: int) -> bool:
        return self._set_active(pattern_id, False)

    def delete(self, pattern_id: int) -> bool:
        with self._lock:
            removed = self._bundles.pop(pattern_id, None)
        if removed is not None:
            logger.info("pattern_deleted", pattern_id=pattern_id, institution=removed.institution)
        return removed is not None

    def _set_active(self, pattern_id: int, active: bool) -> bool:
        with self._lock:
            bundle = self._bundles.get(pattern_id)
            if bundle is None:
                return False
            self._bundles[pattern_id] = bundle.model_copy(update={"is_active": active})
        logger.info("pattern_active_changed", pattern_id=pattern_id, is_active=active)
        return True

    def load_bundles(self, path: Path, *, strict: bool = False) -> list[PatternBundle]:
        """Register bundles from a JSON file containing an array of bundle objects.

        Raises:
            ConfigurationError: If the file is missing or not a valid bundle list.
        """
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"Cannot read pattern file {path}: {exc}") from exc

        if not isinstance(raw, list):
            raise ConfigurationError(f"Pattern file {path} must contain a JSON array")

        try:
            bundles = [PatternBundle.model_validate(item) for item in raw]
        except pydantic.ValidationError as exc:
            raise ConfigurationError(f"Invalid pattern bundle in {path}: {exc}") from exc

        registered = [self.register(b, strict=strict) for b in bundles]
        logger.info("pattern_file_loaded", path=str(path), bundle_count=len(registered))
        return registered
