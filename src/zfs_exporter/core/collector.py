"""Per-scrape translation of ZFS pool statistics into metric samples."""

import logging

from zfs_exporter.core.exceptions import SourceUnavailableError, ZfsExporterError
from zfs_exporter.core.extended import EXTENDED_STATS, ExtendedStatRegistry
from zfs_exporter.core.models import MetricDescriptor, MetricSample, VdevTree
from zfs_exporter.core.ports import StatsSourcePort
from zfs_exporter.core.schema import VDEV_STATS, PositionalSchema

logger = logging.getLogger(__name__)


class VdevCollector:
    """Collects top-level vdev metrics for every pool of a stats source.

    The collector keeps no state between scrapes. Its schema and registry
    are built once here and only read afterwards, so one instance can serve
    concurrent scrapes.

    Args:
        source: Where pool statistics come from.
        namespace: Metric name prefix (default: "zfs").
    """

    def __init__(self, source: StatsSourcePort, namespace: str = "zfs") -> None:
        self._source = source
        self._schema = PositionalSchema(VDEV_STATS, namespace=namespace)
        self._registry = ExtendedStatRegistry(EXTENDED_STATS, namespace=namespace)
        self._descriptors = self._schema.descriptors + self._registry.descriptors

    @property
    def schema(self) -> PositionalSchema:
        return self._schema

    @property
    def registry(self) -> ExtendedStatRegistry:
        return self._registry

    def describe(self) -> tuple[MetricDescriptor, ...]:
        """Return every descriptor this collector can ever produce."""
        return self._descriptors

    def collect(self) -> list[MetricSample]:
        """Scrape the source and decode all top-level vdevs.

        Returns:
            Samples grouped by pool and vdev; positional stats first, then
            extended stats of the same vdev.

        Raises:
            SourceUnavailableError: If pools or a device tree cannot be read.
                Nothing is returned in that case.
            SchemaViolationError: If an extended stat has an unknown shape.
        """
        pools = self._list_pools()
        if not pools:
            logger.warning("No pools found")

        samples: list[MetricSample] = []
        for pool in pools:
            tree = self._get_vdev_tree(pool)
            for vdev in tree.children:
                name = vdev.name
                samples.extend(self._schema.decode(vdev.stats, name, pool))
                samples.extend(self._registry.decode(vdev.stats_ex, name, pool))

        logger.debug("Collected %d samples from %d pools", len(samples), len(pools))
        return samples

    def _list_pools(self) -> list[str]:
        try:
            return list(self._source.list_pools())
        except ZfsExporterError:
            raise
        except Exception as e:
            raise SourceUnavailableError(f"failed to list pools: {e}") from e

    def _get_vdev_tree(self, pool: str) -> VdevTree:
        try:
            return self._source.get_vdev_tree(pool)
        except ZfsExporterError:
            raise
        except Exception as e:
            raise SourceUnavailableError(
                f"failed to read stats of pool {pool!r}: {e}"
            ) from e
