"""Buffers, packet layouts, sessions, packet dispatch, rooms, monitoring and memory pools for a packet-based chat server."""

__version__ = "0.1.0"