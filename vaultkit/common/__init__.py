"""Shared utilities for the vault client (logging, trace propagation)."""
