"""Constant build information metric."""

import platform
from importlib.metadata import PackageNotFoundError, version

from zfs_exporter.core.models import MetricDescriptor, MetricSample, ValueType

BUILD_INFO = MetricDescriptor(
    name="zfs_exporter_build_info",
    help=(
        "A metric with a constant '1' value labeled by version and "
        "pythonversion from which zfs_exporter was built."
    ),
    label_names=("version", "pythonversion"),
)


def exporter_version() -> str:
    """Return the installed package version, or "unknown"."""
    try:
        return version("zfs-exporter")
    except PackageNotFoundError:
        return "unknown"


def build_info_sample() -> MetricSample:
    """Return the build info gauge for the running exporter."""
    return MetricSample(
        descriptor=BUILD_INFO,
        label_values=(exporter_version(), platform.python_version()),
        value=1.0,
        value_type=ValueType.GAUGE,
    )
