"""Prometheus text format encoder for metric samples."""

import math
from collections.abc import Iterable

from zfs_exporter.core.models import MetricDescriptor, MetricSample, ValueType

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def _format_value(value: float) -> str:
    """Format a float the way Prometheus expects.

    Integral values are written without a fractional part.
    """
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if math.isnan(value):
        return "NaN"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def _escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _format_labels(pairs: Iterable[tuple[str, str]]) -> str:
    """Format label pairs as {k="v",...}, or empty string if there are none."""
    parts = [f'{k}="{_escape_label_value(v)}"' for k, v in pairs]
    if not parts:
        return ""
    return "{" + ",".join(parts) + "}"


def _encode_sample(sample: MetricSample) -> list[str]:
    name = sample.name
    pairs = list(zip(sample.descriptor.label_names, sample.label_values, strict=True))

    if sample.value_type is not ValueType.HISTOGRAM or sample.histogram is None:
        return [f"{name}{_format_labels(pairs)} {_format_value(sample.value)}"]

    histogram = sample.histogram
    lines = []
    for upper_bound, count in histogram.buckets:
        labels = _format_labels([*pairs, ("le", _format_value(upper_bound))])
        lines.append(f"{name}_bucket{labels} {count}")
    # The exposition format requires a +Inf bucket holding the total count.
    labels = _format_labels([*pairs, ("le", "+Inf")])
    lines.append(f"{name}_bucket{labels} {histogram.count}")
    lines.append(f"{name}_sum{_format_labels(pairs)} {_format_value(histogram.sum)}")
    lines.append(f"{name}_count{_format_labels(pairs)} {histogram.count}")
    return lines


def encode_metrics(samples: Iterable[MetricSample]) -> str:
    """Encode metric samples to Prometheus text exposition format.

    Samples are grouped by metric family. Each family gets one HELP and one
    TYPE line, in the order families first appear.

    Args:
        samples: An iterable of MetricSample objects.

    Returns:
        Prometheus text format string. Empty string if no samples.

    Raises:
        ValueError: If samples of one family have different value types.
    """
    families: dict[MetricDescriptor, list[MetricSample]] = {}
    for sample in samples:
        families.setdefault(sample.descriptor, []).append(sample)

    lines = []
    for descriptor, family in families.items():
        value_types = {sample.value_type for sample in family}
        if len(value_types) > 1:
            kinds = ", ".join(sorted(t.value for t in value_types))
            raise ValueError(f"metric {descriptor.name} mixes value types: {kinds}")
        (value_type,) = value_types
        lines.append(f"# HELP {descriptor.name} {_escape_help(descriptor.help)}")
        lines.append(f"# TYPE {descriptor.name} {value_type.value}")
        for sample in family:
            lines.extend(_encode_sample(sample))

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
