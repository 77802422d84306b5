"""Tests for positional vdev_stats decoding."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from zfs_exporter.core.models import EntryKind, ValueType, scalar, skip, variant
from zfs_exporter.core.schema import (
    ERROR_TYPES,
    VDEV_STATS,
    ZIO_TYPES,
    PositionalSchema,
)

counters = st.integers(min_value=0, max_value=2**64 - 1)

SMALL_SCHEMA = (
    skip(),
    scalar("state", "state"),
    variant("ops", "I/O operations", "type", ("read", "write")),
    scalar("slow_ios", "slow I/O operations"),
)


def _expected_sample_count(schema: PositionalSchema) -> int:
    return sum(
        e.slot_count for e in schema.entries if e.kind is not EntryKind.SKIP
    )


class TestSchemaTable:
    """Tests for the default VDEV_STATS table."""

    @pytest.mark.core
    def test_full_record_length(self) -> None:
        """A complete record has 45 counters."""
        assert PositionalSchema().slot_count == 45

    @pytest.mark.core
    def test_descriptors_follow_declaration_order(self) -> None:
        """Descriptors appear in table order, skip entries excluded."""
        names = [d.name for d in PositionalSchema().descriptors]
        assert names[:4] == [
            "zfs_vdev_state",
            "zfs_vdev_space_allocated_bytes",
            "zfs_vdev_space_capacity_bytes",
            "zfs_vdev_space_deflated_capacity_bytes",
        ]
        assert names[-1] == "zfs_vdev_ashift_physical"
        assert len(names) == 29

    @pytest.mark.core
    def test_scalar_descriptor_labels(self) -> None:
        """Scalar stats are labeled by vdev and pool."""
        state = PositionalSchema().descriptors[0]
        assert state.label_names == ("vdev", "zpool")
        assert state.help == "ZFS VDev state (see pool_state_t)"

    @pytest.mark.core
    def test_variant_descriptor_labels(self) -> None:
        """Variant stats add their dimension label."""
        by_name = {d.name: d for d in PositionalSchema().descriptors}
        assert by_name["zfs_vdev_ops"].label_names == ("vdev", "zpool", "type")
        assert by_name["zfs_vdev_errors"].label_names == ("vdev", "zpool", "type")

    @pytest.mark.core
    def test_variant_dimensions(self) -> None:
        """Operation and error families fan out over their kinds."""
        by_name = {e.name: e for e in VDEV_STATS}
        assert by_name["ops"].variants == ZIO_TYPES
        assert by_name["bytes"].variants == ZIO_TYPES
        assert by_name["errors"].variants == ERROR_TYPES

    @pytest.mark.core
    def test_namespace_prefixes_names(self) -> None:
        """A custom namespace replaces the zfs prefix."""
        schema = PositionalSchema(namespace="storage")
        assert schema.descriptors[0].name == "storage_vdev_state"


class TestDecode:
    """Tests for PositionalSchema.decode()."""

    @pytest.mark.core
    def test_decode_small_schema(self) -> None:
        """Entries and slots are consumed in lock-step."""
        schema = PositionalSchema(SMALL_SCHEMA)

        samples = schema.decode([99, 1, 5, 6, 7], "mirror-0", "tank")

        assert [(s.name, s.label_values, s.value) for s in samples] == [
            ("zfs_vdev_state", ("mirror-0", "tank"), 1.0),
            ("zfs_vdev_ops", ("mirror-0", "tank", "read"), 5.0),
            ("zfs_vdev_ops", ("mirror-0", "tank", "write"), 6.0),
            ("zfs_vdev_slow_ios", ("mirror-0", "tank"), 7.0),
        ]
        assert all(s.value_type is ValueType.UNTYPED for s in samples)

    @pytest.mark.core
    def test_decode_empty_record(self) -> None:
        """An empty record yields no samples."""
        assert PositionalSchema().decode([], "disk-0", "tank") == []

    @pytest.mark.core
    def test_decode_stops_before_partial_variant(self) -> None:
        """A variant group that does not fit is dropped entirely."""
        schema = PositionalSchema(SMALL_SCHEMA)

        samples = schema.decode([99, 1, 5], "mirror-0", "tank")

        assert [s.name for s in samples] == ["zfs_vdev_state"]

    @pytest.mark.core
    def test_decode_ignores_trailing_slots(self) -> None:
        """Counters appended by newer ZFS versions are ignored."""
        schema = PositionalSchema(SMALL_SCHEMA)

        samples = schema.decode([0, 1, 2, 3, 4, 5, 6, 7], "mirror-0", "tank")

        assert len(samples) == 4
        assert samples[-1].value == 4.0

    @pytest.mark.core
    def test_decode_full_default_record(self) -> None:
        """A complete record yields one sample per scalar and variant value."""
        schema = PositionalSchema()
        raw = list(range(schema.slot_count))

        samples = schema.decode(raw, "raidz-0", "tank")

        assert len(samples) == 42
        assert samples[-1].name == "zfs_vdev_ashift_physical"
        assert samples[-1].value == float(schema.slot_count - 1)

    @pytest.mark.core
    def test_decode_large_counter(self) -> None:
        """uint64 maximum is preserved as a float."""
        schema = PositionalSchema(SMALL_SCHEMA)

        samples = schema.decode([0, 2**64 - 1], "disk-0", "tank")

        assert samples[0].value == float(2**64 - 1)


class TestDecodePropertyBased:
    """Property-based tests for positional decoding."""

    @pytest.mark.core
    @given(raw=st.lists(counters, max_size=60))
    def test_never_reads_past_end(self, raw: list[int]) -> None:
        """Any record length decodes without error to covered entries only."""
        schema = PositionalSchema()

        samples = schema.decode(raw, "raidz-0", "tank")

        # Rebuild the expected sample sequence entry by entry.
        expected: list[float] = []
        i = 0
        for entry in schema.entries:
            if i + entry.slot_count > len(raw):
                break
            if entry.kind is not EntryKind.SKIP:
                expected.extend(float(v) for v in raw[i : i + entry.slot_count])
            i += entry.slot_count
        assert [s.value for s in samples] == expected

    @pytest.mark.core
    @given(raw=st.lists(counters, min_size=45, max_size=45))
    def test_full_record_sample_count(self, raw: list[int]) -> None:
        """A full-length record always yields every possible sample."""
        schema = PositionalSchema()

        samples = schema.decode(raw, "raidz-0", "tank")

        assert len(samples) == _expected_sample_count(schema)
