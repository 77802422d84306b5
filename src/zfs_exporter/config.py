"""Exporter configuration."""

import os
import re
from dataclasses import dataclass, replace

DEFAULT_LISTEN_ADDRESS = ":9700"

_NAMESPACE_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class ExporterConfig:
    """Settings for running the exporter.

    Attributes:
        listen_address: ``host:port`` to serve on; an empty host means all
            interfaces.
        namespace: Metric name prefix.
        snapshot_path: JSON snapshot to read pool statistics from.
        log_level: Root log level name.
    """

    listen_address: str = DEFAULT_LISTEN_ADDRESS
    namespace: str = "zfs"
    snapshot_path: str | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not _NAMESPACE_RE.match(self.namespace):
            raise ValueError(f"invalid metric namespace: {self.namespace!r}")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"invalid log level: {self.log_level!r}")
        parse_listen_address(self.listen_address)

    @classmethod
    def from_env(cls) -> "ExporterConfig":
        """Build a config from ZFS_EXPORTER_* environment variables."""
        defaults = cls()
        return cls(
            listen_address=os.getenv(
                "ZFS_EXPORTER_LISTEN_ADDRESS", defaults.listen_address
            ),
            namespace=os.getenv("ZFS_EXPORTER_NAMESPACE", defaults.namespace),
            snapshot_path=os.getenv("ZFS_EXPORTER_SNAPSHOT") or None,
            log_level=os.getenv("ZFS_EXPORTER_LOG_LEVEL", defaults.log_level),
        )

    def override(self, **changes: str | None) -> "ExporterConfig":
        """Return a copy with every non-None change applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split ``host:port`` into its parts.

    Args:
        address: e.g. ":9700", "127.0.0.1:9700" or "[::1]:9700".

    Returns:
        (host, port); the host is "0.0.0.0" when omitted.

    Raises:
        ValueError: If the port is missing or out of range.
    """
    host, sep, port_str = address.rpartition(":")
    if not sep:
        raise ValueError(f"listen address must be host:port, got {address!r}")
    try:
        port = int(port_str)
    except ValueError:
        raise ValueError(f"invalid port in listen address {address!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"port out of range in listen address {address!r}")
    host = host.strip("[]")
    return host or "0.0.0.0", port
