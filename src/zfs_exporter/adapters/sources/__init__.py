"""Statistics sources implementing StatsSourcePort."""

from zfs_exporter.adapters.sources.in_memory import InMemoryStatsSource
from zfs_exporter.adapters.sources.snapshot import (
    SnapshotStatsSource,
    parse_vdev_tree,
)

__all__ = [
    "InMemoryStatsSource",
    "SnapshotStatsSource",
    "parse_vdev_tree",
]
