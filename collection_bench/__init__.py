"""
Cross-container access benchmarks for associative containers.

This package builds large populations of dicts and sets, times a fixed
catalogue of size reads and key/value scans across them, and prints
average/min/max tables for comparing container layouts.
"""

from .main import main

__all__ = ["main"]
