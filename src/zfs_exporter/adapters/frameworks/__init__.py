"""Web framework adapters exposing the /metrics endpoint."""
