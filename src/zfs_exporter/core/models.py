"""Core domain models for vdev statistics and metric samples."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

# A value in a vdev's extended stat map: a scalar or a histogram's increments.
ExtendedStatValue = int | Sequence[int]


def is_counter(value: object) -> bool:
    """Return True if value is an unsigned integer counter."""
    # bool is an int subclass but never a valid counter
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class EntryKind(Enum):
    """How a positional schema entry consumes raw counter slots."""

    SKIP = "skip"
    SCALAR = "scalar"
    VARIANT = "variant"


class ValueType(Enum):
    """Prometheus value type of a metric sample."""

    UNTYPED = "untyped"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"


@dataclass(frozen=True)
class Vdev:
    """A node of a pool's device tree.

    Attributes:
        kind: Device type as reported by ZFS (e.g. "raidz", "mirror", "disk").
        index: Ordinal position among its siblings.
        stats: Raw positional counter array (vdev_stats).
        stats_ex: Extended statistics (vdev_stats_ex).
        children: Nested vdevs. Carried for completeness, never decoded.
    """

    kind: str
    index: int
    stats: tuple[int, ...] = ()
    stats_ex: Mapping[str, ExtendedStatValue] = field(default_factory=dict)
    children: tuple["Vdev", ...] = ()

    @property
    def name(self) -> str:
        """Identity label of the form ``<kind>-<index>``.

        This does not always match the names shown by ``zpool status``.
        """
        return f"{self.kind}-{self.index}"


@dataclass(frozen=True)
class VdevTree:
    """Root of a pool's device tree; children are the top-level vdevs."""

    children: tuple[Vdev, ...] = ()


@dataclass(frozen=True)
class SchemaEntry:
    """One slot (or group of slots) of the positional vdev_stats array.

    A tagged variant: ``kind`` decides which of the other fields matter.
    Use the :func:`skip`, :func:`scalar` and :func:`variant` constructors.

    Attributes:
        kind: SKIP, SCALAR or VARIANT.
        name: Stat name, suffixed to ``<namespace>_vdev_``. Empty for SKIP.
        description: Human readable description used for HELP text.
        dimension: Label name carrying the variant value (VARIANT only).
        variants: Ordered variant values, one raw slot each (VARIANT only).
    """

    kind: EntryKind
    name: str = ""
    description: str = ""
    dimension: str = ""
    variants: tuple[str, ...] = ()

    @property
    def slot_count(self) -> int:
        """Number of raw counter slots this entry consumes."""
        if self.kind is EntryKind.VARIANT:
            return len(self.variants)
        return 1


def skip() -> SchemaEntry:
    """Entry that consumes one slot and produces nothing."""
    return SchemaEntry(kind=EntryKind.SKIP)


def scalar(name: str, description: str) -> SchemaEntry:
    """Entry that consumes one slot and produces one sample."""
    return SchemaEntry(kind=EntryKind.SCALAR, name=name, description=description)


def variant(
    name: str, description: str, dimension: str, variants: Sequence[str]
) -> SchemaEntry:
    """Entry that consumes one slot per variant value."""
    return SchemaEntry(
        kind=EntryKind.VARIANT,
        name=name,
        description=description,
        dimension=dimension,
        variants=tuple(variants),
    )


@dataclass(frozen=True)
class MetricDescriptor:
    """Static identity of a metric family.

    Attributes:
        name: Full metric name (e.g. zfs_vdev_state).
        help: HELP text.
        label_names: Ordered label names every sample must supply values for.
    """

    name: str
    help: str
    label_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class CumulativeHistogram:
    """A histogram whose bucket counts include every smaller bucket.

    Attributes:
        buckets: Ordered (upper_bound, cumulative_count) pairs. No +Inf bucket.
        count: Total number of observations.
        sum: Sum of observations. ZFS does not track it, so it is 0.0.
    """

    buckets: tuple[tuple[float, int], ...] = ()
    count: int = 0
    sum: float = 0.0


@dataclass(frozen=True)
class MetricSample:
    """A single decoded metric value.

    Attributes:
        descriptor: The metric family this sample belongs to.
        label_values: Values for ``descriptor.label_names``, in the same order.
        value: Numeric value (UNTYPED and GAUGE samples).
        histogram: Cumulative histogram (HISTOGRAM samples).
        value_type: Prometheus value type.
    """

    descriptor: MetricDescriptor
    label_values: tuple[str, ...]
    value: float = 0.0
    histogram: CumulativeHistogram | None = None
    value_type: ValueType = ValueType.UNTYPED

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def labels(self) -> dict[str, str]:
        """Label names mapped to their values."""
        return dict(zip(self.descriptor.label_names, self.label_values, strict=True))
