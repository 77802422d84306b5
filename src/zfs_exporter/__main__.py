"""Command line entry point.

Run with:
    python -m zfs_exporter --snapshot /var/lib/zfs_exporter/stats.json

Endpoints:
    /         - Landing page
    /metrics  - Prometheus text format (fresh scrape per request)
"""

import argparse
import logging
import sys

import uvicorn

from zfs_exporter.adapters.frameworks.asgi import create_asgi_app
from zfs_exporter.adapters.sources.snapshot import SnapshotStatsSource
from zfs_exporter.config import ExporterConfig, parse_listen_address
from zfs_exporter.core.build_info import exporter_version
from zfs_exporter.core.collector import VdevCollector

logger = logging.getLogger("zfs_exporter")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zfs_exporter",
        description="Prometheus exporter for ZFS vdev statistics",
    )
    parser.add_argument(
        "--listen-addr",
        help="Address the ZFS exporter should listen on (default: :9700)",
    )
    parser.add_argument(
        "--snapshot", help="JSON snapshot of pool statistics to serve"
    )
    parser.add_argument("--namespace", help="Metric name prefix (default: zfs)")
    parser.add_argument("--log-level", help="Log level (default: INFO)")
    parser.add_argument(
        "--version", action="store_true", help="Show version and exit"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"zfs_exporter {exporter_version()}")
        return 0

    try:
        config = ExporterConfig.from_env().override(
            listen_address=args.listen_addr,
            snapshot_path=args.snapshot,
            namespace=args.namespace,
            log_level=args.log_level,
        )
    except ValueError as e:
        print(f"zfs_exporter: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if config.snapshot_path is None:
        logger.error("No statistics source configured; pass --snapshot")
        return 2

    collector = VdevCollector(
        SnapshotStatsSource(config.snapshot_path), namespace=config.namespace
    )
    host, port = parse_listen_address(config.listen_address)
    logger.info("Listening on %s:%d", host, port)
    uvicorn.run(create_asgi_app(collector), host=host, port=port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
