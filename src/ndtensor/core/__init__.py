"""
Core array engine, mathematical primitives, and snapshot contracts.

This module contains the foundational building blocks that are independent
of any I/O or external systems.
"""
