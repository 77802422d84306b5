"""Adapters connecting the core to sources and web frameworks."""
