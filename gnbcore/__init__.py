"""Bounded heap, fixed pools and lists, linked lists, network addresses and logging."""

__version__ = "0.1.0"