"""Checksums, ICMP extension parsing and probe sockets for network path tracing."""

__version__ = "0.1.0"