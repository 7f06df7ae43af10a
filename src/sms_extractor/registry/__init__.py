"""Pattern and account-mapping registries.

Both registries are read-mostly structures shared between concurrent
extractions; mutations take an exclusive lock.
"""

from .accounts import AccountMappingService
from .builtin import KNOWN_INSTITUTIONS, default_bundles
from .patterns import PatternRegistry

__all__ = ["AccountMappingService", "KNOWN_INSTITUTIONS", "PatternRegistry", "default_bundles"]
