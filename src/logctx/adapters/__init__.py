"""Adapters connecting the core to concrete backends and frameworks."""
