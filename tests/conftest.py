"""Shared test fixtures for all test modules."""

import json
from pathlib import Path

import pytest

try:
    import httpx
except ImportError:
    httpx = None

from zfs_exporter.adapters.sources.in_memory import InMemoryStatsSource
from zfs_exporter.core.collector import VdevCollector
from zfs_exporter.core.models import Vdev, VdevTree

# Covers the schema up to and including the ops variant:
# timestamp, state, aux state, 5 space/size fields, 6 ops counters.
TANK_RAIDZ_STATS = (
    1702300000,
    1,
    0,
    1_000_000_000,
    4_000_000_000,
    3_500_000_000,
    0,
    0,
    10,
    20,
    30,
    40,
    50,
    60,
)


# === Stats Source Fixtures ===


@pytest.fixture
def raidz_vdev() -> Vdev:
    """Top-level raidz vdev with a short record and no extended stats."""
    return Vdev(kind="raidz", index=0, stats=TANK_RAIDZ_STATS)


@pytest.fixture
def tank_source(raidz_vdev: Vdev) -> InMemoryStatsSource:
    """Source with a single pool "tank" holding one raidz vdev."""
    return InMemoryStatsSource({"tank": VdevTree(children=(raidz_vdev,))})


@pytest.fixture
def tank_collector(tank_source: InMemoryStatsSource) -> VdevCollector:
    """Collector over the "tank" source."""
    return VdevCollector(tank_source)


@pytest.fixture
def failing_source():
    """Factory fixture for sources whose calls raise.

    Returns a callable taking the exceptions to raise from list_pools and
    get_vdev_tree (None means the call succeeds).
    """

    class FailingSource:
        def __init__(
            self,
            list_error: Exception | None,
            tree_error: Exception | None,
        ) -> None:
            self._list_error = list_error
            self._tree_error = tree_error
            self.tree = VdevTree(
                children=(Vdev(kind="mirror", index=0, stats=TANK_RAIDZ_STATS),)
            )

        def list_pools(self) -> list[str]:
            if self._list_error is not None:
                raise self._list_error
            return ["good", "bad"]

        def get_vdev_tree(self, pool: str) -> VdevTree:
            if pool == "bad" and self._tree_error is not None:
                raise self._tree_error
            return self.tree

    def _make(
        list_error: Exception | None = None, tree_error: Exception | None = None
    ) -> FailingSource:
        return FailingSource(list_error, tree_error)

    return _make


@pytest.fixture
def snapshot_file(tmp_path: Path):
    """Factory fixture writing a JSON snapshot and returning its path."""

    def _write(data: object) -> Path:
        path = tmp_path / "stats.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def tank_snapshot() -> dict[str, object]:
    """Pool stats nvlist for "tank" with a nested mirror and extended stats."""
    return {
        "tank": {
            "vdev_tree": {
                "type": "root",
                "id": 0,
                "children": [
                    {
                        "type": "raidz",
                        "id": 0,
                        "vdev_stats": list(TANK_RAIDZ_STATS),
                        "vdev_stats_ex": {
                            "vdev_sync_r_pend_queue": 3,
                            "vdev_agg_scrub_histo": [3, 0, 2],
                            "vdev_some_future_stat": 7,
                        },
                        "children": [
                            {"type": "disk", "id": 0, "vdev_stats": [0, 7]},
                            {"type": "disk", "id": 1, "vdev_stats": [0, 7]},
                        ],
                    }
                ],
            }
        }
    }


# === ASGI Test Fixtures ===


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(collector)
            async with asgi_test_client(app) as client:
                response = await client.get("/metrics")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
