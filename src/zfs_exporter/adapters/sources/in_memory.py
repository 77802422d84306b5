"""In-memory statistics source."""

from collections.abc import Iterable, Mapping

from zfs_exporter.core.exceptions import SourceUnavailableError
from zfs_exporter.core.models import VdevTree


class InMemoryStatsSource:
    """In-memory implementation of StatsSourcePort.

    Serves fixed device trees. Suitable for testing and for embedding the
    collector where statistics are obtained by other means.

    Args:
        pools: Pool names mapped to their device trees.
    """

    def __init__(self, pools: Mapping[str, VdevTree] | None = None) -> None:
        self._pools: dict[str, VdevTree] = dict(pools or {})

    def set_pool(self, pool: str, tree: VdevTree) -> None:
        """Add or replace a pool's device tree."""
        self._pools[pool] = tree

    def list_pools(self) -> Iterable[str]:
        """Return the names of all pools."""
        return list(self._pools)

    def get_vdev_tree(self, pool: str) -> VdevTree:
        """Return the device tree of the given pool."""
        try:
            return self._pools[pool]
        except KeyError:
            raise SourceUnavailableError(f"no such pool: {pool!r}") from None
