"""Reconstruction of cumulative histograms from ZFS bucket increments."""

from collections.abc import Sequence

from zfs_exporter.core.models import CumulativeHistogram

# ZFS latency histograms have exactly this many power-of-two buckets, in ns.
LATENCY_HISTOGRAM_BUCKETS = 37

NANOSECONDS_PER_SECOND = 1_000_000_000


def reconstruct_histogram(increments: Sequence[int]) -> CumulativeHistogram:
    """Turn per-bucket increments into a cumulative histogram.

    Bucket ``i`` has the upper bound ``2**i``. Latency histograms (37
    buckets) are in nanoseconds and get converted to seconds; any other
    length (I/O sizes, queue depths) is left in raw units.

    Args:
        increments: Observation count of each bucket, smallest bucket first.

    Returns:
        CumulativeHistogram without a +Inf bucket.
    """
    divisor = 1.0
    if len(increments) == LATENCY_HISTOGRAM_BUCKETS:
        divisor = float(NANOSECONDS_PER_SECOND)

    buckets: list[tuple[float, int]] = []
    acc = 0
    for i, increment in enumerate(increments):
        acc += increment
        buckets.append((2.0**i / divisor, acc))

    return CumulativeHistogram(buckets=tuple(buckets), count=acc)
