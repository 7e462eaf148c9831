"""
Cgroup topology data structures.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple

from ..validation import VirtualFileNotFoundError

# key under which the process's own cgroup directory is always published
DEFAULT_CONTROLLER = "cgroup"
# extra key published in unified mode for the merged hierarchy
UNIFIED_CONTROLLER = ""


class CgroupMode(Enum):
    """Resolver states. ``value`` is what the mode query reports."""
    UNINITIALIZED = "uninitialized"
    LEGACY = "legacy"
    UNIFIED = "unified"
    HYBRID = "hybrid"
    DISABLED = "disabled"


@dataclass(frozen=True)
class CgroupPathTable:
    """
    Read-only mapping from controller name to the absolute directory holding
    that controller's files for this process.

    Entries keep the order in which they were discovered.
    """

    entries: Tuple[Tuple[str, str], ...] = ()
    _index: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_index", MappingProxyType(dict(self.entries)))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.entries)

    def __contains__(self, controller: str) -> bool:
        return controller in self._index

    @property
    def controllers(self) -> Tuple[str, ...]:
        return tuple(key for key, _ in self.entries)

    def get(self, controller: str) -> Optional[str]:
        return self._index.get(controller)

    def lookup(self, controller: str) -> str:
        """
        Return the path for ``controller``.

        Raises:
            VirtualFileNotFoundError: If the controller is not active for this process
        """
        try:
            return self._index[controller]
        except KeyError:
            raise VirtualFileNotFoundError(f"failed to find controller {controller}")
