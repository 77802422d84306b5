"""Registry of ZFS extended vdev statistics (vdev_stats_ex).

Extended stats arrive as a name-keyed map. Several keys share one metric
family and differ only by the ``type`` label, e.g. all ``*_pend_queue`` keys
feed ``zfs_vdev_queue_pending_length``. Keys this registry does not know are
ignored so newer ZFS releases keep working.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from zfs_exporter.core.exceptions import SchemaViolationError
from zfs_exporter.core.histogram import reconstruct_histogram
from zfs_exporter.core.models import (
    MetricDescriptor,
    MetricSample,
    ValueType,
    is_counter,
)

logger = logging.getLogger(__name__)

EXTENDED_LABELS = ("type", "vdev", "zpool")

# Shared metric identities: (suffix, help)
ACTIVE_QUEUE_LENGTH = (
    "queue_active_length",
    "Number of ZIOs issued to disk and waiting to finish",
)
PENDING_QUEUE_LENGTH = (
    "queue_pending_length",
    "Number of ZIOs pending to be issued to disk",
)
QUEUE_LATENCY = (
    "queue_latency",
    "Amount of time an IO request spent in the queue",
)
ZIO_LATENCY_TOTAL = (
    "zio_latency_total",
    "Total ZIO latency including queuing and disk access time.",
)
ZIO_LATENCY_DISK = ("latency_disk", "Amount of time to read/write the disk")
PHYSICAL_IO_SIZE = ("io_size_physical", "Size of the physical I/O requests issued")
AGGREGATED_IO_SIZE = (
    "io_size_aggregated",
    "Size of the aggregated I/O requests issued",
)

METRIC_FAMILIES = (
    ACTIVE_QUEUE_LENGTH,
    PENDING_QUEUE_LENGTH,
    QUEUE_LATENCY,
    ZIO_LATENCY_TOTAL,
    ZIO_LATENCY_DISK,
    PHYSICAL_IO_SIZE,
    AGGREGATED_IO_SIZE,
)


@dataclass(frozen=True)
class ExtendedStat:
    """Maps one vdev_stats_ex key to a metric family and ``type`` label.

    Attributes:
        key: Key in vdev_stats_ex.
        family: Metric family suffix, one of METRIC_FAMILIES' suffixes.
        label: Value of the ``type`` label.
    """

    key: str
    family: str
    label: str


def _stat(key: str, family: tuple[str, str], label: str) -> ExtendedStat:
    return ExtendedStat(key=key, family=family[0], label=label)


EXTENDED_STATS: tuple[ExtendedStat, ...] = (
    _stat("vdev_agg_scrub_histo", AGGREGATED_IO_SIZE, "scrub"),
    _stat("vdev_agg_trim_histo", AGGREGATED_IO_SIZE, "trim"),
    _stat("vdev_async_agg_r_histo", AGGREGATED_IO_SIZE, "async_read"),
    _stat("vdev_async_agg_w_histo", AGGREGATED_IO_SIZE, "async_write"),
    _stat("vdev_async_ind_r_histo", PHYSICAL_IO_SIZE, "async_read"),
    _stat("vdev_async_ind_w_histo", PHYSICAL_IO_SIZE, "async_write"),
    _stat("vdev_async_r_active_queue", ACTIVE_QUEUE_LENGTH, "async_read"),
    _stat("vdev_async_r_lat_histo", QUEUE_LATENCY, "async_read"),
    _stat("vdev_async_r_pend_queue", PENDING_QUEUE_LENGTH, "async_read"),
    _stat("vdev_async_scrub_active_queue", ACTIVE_QUEUE_LENGTH, "scrub"),
    _stat("vdev_async_scrub_pend_queue", PENDING_QUEUE_LENGTH, "scrub"),
    _stat("vdev_async_trim_active_queue", ACTIVE_QUEUE_LENGTH, "trim"),
    _stat("vdev_async_trim_pend_queue", PENDING_QUEUE_LENGTH, "trim"),
    _stat("vdev_async_w_active_queue", ACTIVE_QUEUE_LENGTH, "async_write"),
    _stat("vdev_async_w_lat_histo", QUEUE_LATENCY, "async_write"),
    _stat("vdev_async_w_pend_queue", PENDING_QUEUE_LENGTH, "async_write"),
    _stat("vdev_disk_r_lat_histo", ZIO_LATENCY_DISK, "read"),
    _stat("vdev_disk_w_lat_histo", ZIO_LATENCY_DISK, "write"),
    _stat("vdev_ind_scrub_histo", PHYSICAL_IO_SIZE, "scrub"),
    _stat("vdev_ind_trim_histo", PHYSICAL_IO_SIZE, "trim"),
    _stat("vdev_scrub_histo", QUEUE_LATENCY, "scrub"),
    _stat("vdev_sync_agg_r_histo", AGGREGATED_IO_SIZE, "sync_read"),
    _stat("vdev_sync_agg_w_histo", AGGREGATED_IO_SIZE, "sync_write"),
    _stat("vdev_sync_ind_r_histo", PHYSICAL_IO_SIZE, "sync_read"),
    _stat("vdev_sync_ind_w_histo", PHYSICAL_IO_SIZE, "sync_write"),
    _stat("vdev_sync_r_active_queue", ACTIVE_QUEUE_LENGTH, "sync_read"),
    _stat("vdev_sync_r_lat_histo", QUEUE_LATENCY, "sync_read"),
    _stat("vdev_sync_r_pend_queue", PENDING_QUEUE_LENGTH, "sync_read"),
    _stat("vdev_sync_w_active_queue", ACTIVE_QUEUE_LENGTH, "sync_write"),
    _stat("vdev_sync_w_lat_histo", QUEUE_LATENCY, "sync_write"),
    _stat("vdev_sync_w_pend_queue", PENDING_QUEUE_LENGTH, "sync_write"),
    _stat("vdev_tot_r_lat_histo", ZIO_LATENCY_TOTAL, "read"),
    _stat("vdev_tot_w_lat_histo", ZIO_LATENCY_TOTAL, "write"),
    _stat("vdev_trim_histo", QUEUE_LATENCY, "trim"),
)


class ExtendedStatRegistry:
    """Lookup table from vdev_stats_ex keys to metric descriptors.

    Built once; read-only afterwards.

    Args:
        stats: Known extended stats.
        namespace: Metric name prefix.
    """

    def __init__(
        self, stats: Iterable[ExtendedStat] = EXTENDED_STATS, namespace: str = "zfs"
    ) -> None:
        families = {
            suffix: MetricDescriptor(
                name=f"{namespace}_vdev_{suffix}",
                help=help_text,
                label_names=EXTENDED_LABELS,
            )
            for suffix, help_text in METRIC_FAMILIES
        }
        self._descriptors = tuple(families.values())
        self._by_key: Mapping[str, tuple[MetricDescriptor, str]] = MappingProxyType(
            {s.key: (families[s.family], s.label) for s in stats}
        )

    @property
    def descriptors(self) -> tuple[MetricDescriptor, ...]:
        return self._descriptors

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def lookup(self, key: str) -> tuple[MetricDescriptor, str] | None:
        """Return (descriptor, type label) for a key, or None if unknown."""
        return self._by_key.get(key)

    def decode(
        self, stats_ex: Mapping[str, object], vdev: str, pool: str
    ) -> list[MetricSample]:
        """Decode an extended stat map into samples.

        Unsigned scalars become gauges; sequences of unsigned bucket
        increments become histograms.

        Args:
            stats_ex: The vdev_stats_ex map.
            vdev: Value of the ``vdev`` label.
            pool: Value of the ``zpool`` label.

        Returns:
            Samples in the map's iteration order.

        Raises:
            SchemaViolationError: If a known key holds any other shape.
        """
        samples: list[MetricSample] = []
        for key, value in stats_ex.items():
            meta = self.lookup(key)
            if meta is None:
                logger.debug("Ignoring unknown extended stat %s", key)
                continue
            descriptor, label = meta
            label_values = (label, vdev, pool)
            if is_counter(value):
                samples.append(
                    MetricSample(
                        descriptor=descriptor,
                        label_values=label_values,
                        value=float(value),  # type: ignore[arg-type]
                        value_type=ValueType.GAUGE,
                    )
                )
            elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
                if not all(is_counter(v) for v in value):
                    raise SchemaViolationError(key, value)
                samples.append(
                    MetricSample(
                        descriptor=descriptor,
                        label_values=label_values,
                        histogram=reconstruct_histogram(value),
                        value_type=ValueType.HISTOGRAM,
                    )
                )
            else:
                raise SchemaViolationError(key, value)
        return samples
