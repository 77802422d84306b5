"""zfs_exporter - Prometheus metrics for ZFS top-level vdevs."""

from zfs_exporter.adapters.frameworks.asgi import create_asgi_app
from zfs_exporter.adapters.sources import (
    InMemoryStatsSource,
    SnapshotStatsSource,
    parse_vdev_tree,
)
from zfs_exporter.config import ExporterConfig
from zfs_exporter.core.build_info import build_info_sample
from zfs_exporter.core.collector import VdevCollector
from zfs_exporter.core.encoding.prometheus import encode_metrics
from zfs_exporter.core.exceptions import (
    SchemaViolationError,
    SourceUnavailableError,
    ZfsExporterError,
)
from zfs_exporter.core.extended import EXTENDED_STATS, ExtendedStatRegistry
from zfs_exporter.core.histogram import reconstruct_histogram
from zfs_exporter.core.models import (
    CumulativeHistogram,
    MetricDescriptor,
    MetricSample,
    SchemaEntry,
    ValueType,
    Vdev,
    VdevTree,
)
from zfs_exporter.core.ports import StatsSourcePort
from zfs_exporter.core.schema import VDEV_STATS, PositionalSchema

__all__ = [
    # Core
    "VdevCollector",
    "PositionalSchema",
    "ExtendedStatRegistry",
    "reconstruct_histogram",
    "encode_metrics",
    "build_info_sample",
    "VDEV_STATS",
    "EXTENDED_STATS",
    # Models
    "CumulativeHistogram",
    "MetricDescriptor",
    "MetricSample",
    "SchemaEntry",
    "ValueType",
    "Vdev",
    "VdevTree",
    # Ports
    "StatsSourcePort",
    # Errors
    "ZfsExporterError",
    "SourceUnavailableError",
    "SchemaViolationError",
    # Adapters
    "InMemoryStatsSource",
    "SnapshotStatsSource",
    "parse_vdev_tree",
    "create_asgi_app",
    # Config
    "ExporterConfig",
]
