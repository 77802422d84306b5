"""Port interfaces for statistics sources.

The collector depends only on this protocol, not on how statistics are
actually obtained from ZFS.
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from zfs_exporter.core.models import VdevTree


@runtime_checkable
class StatsSourcePort(Protocol):
    """Port for reading pool statistics.

    Adapters implementing this protocol enumerate pools and return their
    device trees. Examples: InMemoryStatsSource, SnapshotStatsSource.
    Calls may block; the collector imposes no timeout of its own.
    """

    def list_pools(self) -> Iterable[str]:
        """Return the names of all imported pools.

        Raises:
            SourceUnavailableError: If the pools cannot be enumerated.
        """
        ...

    def get_vdev_tree(self, pool: str) -> VdevTree:
        """Return the device tree of the given pool.

        Raises:
            SourceUnavailableError: If the pool's statistics cannot be read.
        """
        ...
