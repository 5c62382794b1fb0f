"""
Output handling for generated artifacts.
"""

from .atomic_writer import AtomicWriter

__all__ = ["AtomicWriter"]
