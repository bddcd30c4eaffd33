"""Socket clients, wire formats and streaming helpers for Android vHALs."""

__version__ = "1.0.0"