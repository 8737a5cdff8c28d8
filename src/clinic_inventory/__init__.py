"""
Clinic inventory tracker.

Stock levels, usage, purchase orders and restock analytics over flat JSON tables.
"""

__version__ = "0.1.0"
