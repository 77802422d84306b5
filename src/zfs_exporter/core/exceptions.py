"""Exceptions raised while translating ZFS statistics."""


class ZfsExporterError(Exception):
    """Base class for all exporter errors."""


class SourceUnavailableError(ZfsExporterError):
    """The statistics source could not list pools or return a device tree.

    Aborts the whole scrape; no partial sample set is ever produced.
    """


class SchemaViolationError(ZfsExporterError):
    """An extended stat has a shape the registry cannot interpret.

    Attributes:
        key: The extended stat key.
        value: The offending value.
    """

    def __init__(self, key: str, value: object) -> None:
        self.key = key
        self.value = value
        super().__init__(
            f"invalid type encountered for extended stat {key!r}: "
            f"{type(value).__name__}"
        )
