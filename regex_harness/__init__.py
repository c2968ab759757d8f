"""
Regex compression harness.

Drives an external regex transformer over a batch of patterns and checks the
transformed ("after") patterns against the originals ("before") for both
matching equivalence and matching speed.
"""

__version__ = "0.1.0"
