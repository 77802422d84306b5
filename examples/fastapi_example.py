"""Example FastAPI application exposing ZFS vdev metrics.

Run with:
    uvicorn examples.fastapi_example:app --reload

Endpoints:
    /metrics  - Prometheus text format, decoded from examples/stats.json
    /health   - Liveness check
"""

from pathlib import Path

from fastapi import FastAPI

from zfs_exporter.adapters.frameworks.fastapi import create_metrics_router
from zfs_exporter.adapters.sources.snapshot import SnapshotStatsSource
from zfs_exporter.core.collector import VdevCollector

SNAPSHOT = Path(__file__).parent / "stats.json"

collector = VdevCollector(SnapshotStatsSource(SNAPSHOT))

app = FastAPI(title="ZFS Exporter Example")

# Mount the metrics endpoint
app.include_router(create_metrics_router(collector))


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness check that does not touch ZFS."""
    return {"status": "ok"}
