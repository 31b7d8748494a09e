"""Core configuration, errors and helpers for hubshift."""
