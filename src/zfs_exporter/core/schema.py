"""Positional schema of the vdev_stats counter array.

ZFS reports per-vdev counters as a flat array of uint64 with no tagging.
The meaning of every slot is fixed by its position, so the table below must
list entries in exactly the order ZFS lays them out. Newer ZFS versions
append counters; older ones report fewer. Decoding stops at whichever ends
first.
"""

from collections.abc import Iterable, Sequence

from zfs_exporter.core.models import (
    EntryKind,
    MetricDescriptor,
    MetricSample,
    SchemaEntry,
    ValueType,
    scalar,
    skip,
    variant,
)

ZIO_TYPES = ("null", "read", "write", "free", "claim", "ioctl")

ERROR_TYPES = ("read", "write", "checksum", "initialize")

VDEV_LABELS = ("vdev", "zpool")

VDEV_STATS: tuple[SchemaEntry, ...] = (
    skip(),  # timestamp
    scalar("state", "state (see pool_state_t)"),
    skip(),  # auxiliary state, only relevant for non-imported pools
    scalar("space_allocated_bytes", "allocated space in bytes"),
    scalar("space_capacity_bytes", "total capacity in bytes"),
    scalar("space_deflated_capacity_bytes", "deflated capacity in bytes"),
    scalar("devsize_replaceable", "replaceable device size"),
    scalar("devsize_expandable", "expandable device size"),
    variant("ops", "I/O operations", "type", ZIO_TYPES),
    variant("bytes", "bytes processed", "type", ZIO_TYPES),
    variant("errors", "errors encountered", "type", ERROR_TYPES),
    scalar("self_healed_bytes", "bytes self-healed"),
    skip(),  # removed stat
    scalar("scan_processed_bytes", "bytes scanned"),
    scalar("fragmentation", "fragmentation"),
    scalar("initialize_processed_bytes", "bytes already initialized"),
    scalar(
        "initialize_estimated_bytes", "estimated total number of bytes to initialize"
    ),
    scalar("initialize_state", "initialize state (see initialize_state_t)"),
    scalar("initialize_action_time", "initialize time"),
    scalar("checkpoint_space_bytes", "checkpoint space in bytes"),
    scalar("resilver_deferred", "resilver deferred"),
    scalar("slow_ios", "slow I/O operations"),
    scalar("trim_errors", "trim errors"),
    scalar("trim_unsupported", "doesn't support TRIM"),
    scalar("trim_processed_bytes", "TRIMmed bytes"),
    scalar("trim_estimated_bytes", "estimated bytes to TRIM"),
    scalar("trim_state", "trim state"),
    scalar("trim_action_time", "trim time"),
    scalar("rebuild_processed_bytes", "bytes already rebuilt"),
    scalar("ashift_configured", "configured ashift"),
    scalar("ashift_logical", "logical ashift"),
    scalar("ashift_physical", "physical ashift"),
)


class PositionalSchema:
    """Decoder for the vdev_stats array.

    Descriptors are built once at construction; the instance is never
    mutated afterwards and can be shared between concurrent scrapes.

    Args:
        entries: Schema entries in raw array order.
        namespace: Metric name prefix.
    """

    def __init__(
        self, entries: Iterable[SchemaEntry] = VDEV_STATS, namespace: str = "zfs"
    ) -> None:
        self._entries = tuple(entries)
        # Parallel to _entries; None for SKIP.
        self._entry_descriptors = tuple(
            None if e.kind is EntryKind.SKIP else _descriptor_for(e, namespace)
            for e in self._entries
        )

    @property
    def entries(self) -> tuple[SchemaEntry, ...]:
        return self._entries

    @property
    def descriptors(self) -> tuple[MetricDescriptor, ...]:
        """Descriptors of all non-skip entries, in declaration order."""
        return tuple(d for d in self._entry_descriptors if d is not None)

    @property
    def slot_count(self) -> int:
        """Number of raw slots a complete record has."""
        return sum(e.slot_count for e in self._entries)

    def decode(self, raw: Sequence[int], vdev: str, pool: str) -> list[MetricSample]:
        """Decode a raw counter array into samples.

        Stops without error at the first entry ``raw`` does not fully cover,
        so a variant group is emitted completely or not at all. Trailing
        slots beyond the schema are ignored.

        Args:
            raw: The vdev_stats array.
            vdev: Value of the ``vdev`` label.
            pool: Value of the ``zpool`` label.

        Returns:
            Samples in declaration order.
        """
        samples: list[MetricSample] = []
        i = 0
        for entry, descriptor in zip(self._entries, self._entry_descriptors):
            if i >= len(raw):
                break
            if descriptor is None:
                i += 1
                continue
            if entry.kind is EntryKind.SCALAR:
                samples.append(
                    MetricSample(
                        descriptor=descriptor,
                        label_values=(vdev, pool),
                        value=float(raw[i]),
                        value_type=ValueType.UNTYPED,
                    )
                )
                i += 1
                continue
            if i + entry.slot_count > len(raw):
                break
            for value in entry.variants:
                samples.append(
                    MetricSample(
                        descriptor=descriptor,
                        label_values=(vdev, pool, value),
                        value=float(raw[i]),
                        value_type=ValueType.UNTYPED,
                    )
                )
                i += 1
        return samples


def _descriptor_for(entry: SchemaEntry, namespace: str) -> MetricDescriptor:
    labels = VDEV_LABELS
    if entry.kind is EntryKind.VARIANT:
        labels = (*VDEV_LABELS, entry.dimension)
    return MetricDescriptor(
        name=f"{namespace}_vdev_{entry.name}",
        help=f"ZFS VDev {entry.description}",
        label_names=labels,
    )
