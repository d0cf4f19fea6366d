"""Buffers, checksums, authentication, command services, USB ids and connection recovery for the novacom device link."""

__version__ = "0.1.0"