"""Statistics source backed by a JSON snapshot file.

The snapshot mirrors the pool stats nvlist the kernel returns:

    {
      "tank": {
        "vdev_tree": {
          "type": "root",
          "children": [
            {
              "type": "raidz",
              "id": 0,
              "vdev_stats": [...],
              "vdev_stats_ex": {"vdev_sync_r_active_queue": 0, ...},
              "children": [...]
            }
          ]
        }
      }
    }

The file is read again on every call, so a scrape always sees the file's
current contents.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from zfs_exporter.core.exceptions import SourceUnavailableError
from zfs_exporter.core.models import Vdev, VdevTree, is_counter

logger = logging.getLogger(__name__)


def _parse_vdev(nvlist: Mapping[str, Any], index: int) -> Vdev:
    kind = nvlist.get("type")
    if not isinstance(kind, str):
        raise SourceUnavailableError(f"vdev {index} has no type")
    vdev_id = nvlist.get("id", index)
    if not isinstance(vdev_id, int) or isinstance(vdev_id, bool):
        raise SourceUnavailableError(f"vdev {kind} has an invalid id: {vdev_id!r}")
    stats = nvlist.get("vdev_stats", [])
    if not isinstance(stats, list) or not all(is_counter(v) for v in stats):
        raise SourceUnavailableError(f"vdev {kind}-{vdev_id} has invalid vdev_stats")
    stats_ex = nvlist.get("vdev_stats_ex", {})
    if not isinstance(stats_ex, dict):
        raise SourceUnavailableError(
            f"vdev {kind}-{vdev_id} has invalid vdev_stats_ex"
        )
    # Extended stat values are kept as-is; their shape is checked on decode.
    return Vdev(
        kind=kind,
        index=vdev_id,
        stats=tuple(stats),
        stats_ex={
            k: tuple(v) if isinstance(v, list) else v for k, v in stats_ex.items()
        },
        children=_parse_children(nvlist),
    )


def _parse_children(nvlist: Mapping[str, Any]) -> tuple[Vdev, ...]:
    children = nvlist.get("children", [])
    if not isinstance(children, list):
        raise SourceUnavailableError("vdev children must be a list")
    return tuple(_parse_vdev(child, i) for i, child in enumerate(children))


def parse_vdev_tree(pool_stats: Mapping[str, Any]) -> VdevTree:
    """Build a VdevTree from a pool stats nvlist.

    Args:
        pool_stats: Mapping holding a ``vdev_tree`` entry.

    Returns:
        VdevTree whose children are the top-level vdevs.

    Raises:
        SourceUnavailableError: If the structure is malformed.
    """
    tree = pool_stats.get("vdev_tree")
    if not isinstance(tree, dict):
        raise SourceUnavailableError("pool stats have no vdev_tree")
    return VdevTree(children=_parse_children(tree))


class SnapshotStatsSource:
    """StatsSourcePort implementation reading a JSON snapshot file.

    Args:
        path: Path to the snapshot file.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _load(self) -> dict[str, Any]:
        try:
            with self._path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SourceUnavailableError(
                f"failed to read snapshot {self._path}: {e}"
            ) from e
        if not isinstance(data, dict):
            raise SourceUnavailableError(
                f"snapshot {self._path} must map pool names to pool stats"
            )
        return data

    def list_pools(self) -> Iterable[str]:
        """Return the pool names present in the snapshot."""
        pools = list(self._load())
        logger.debug("Snapshot %s lists %d pools", self._path, len(pools))
        return pools

    def get_vdev_tree(self, pool: str) -> VdevTree:
        """Return the device tree of a pool in the snapshot."""
        data = self._load()
        if pool not in data:
            raise SourceUnavailableError(f"pool {pool!r} not in snapshot")
        pool_stats = data[pool]
        if not isinstance(pool_stats, dict):
            raise SourceUnavailableError(f"pool {pool!r} stats must be an object")
        return parse_vdev_tree(pool_stats)
