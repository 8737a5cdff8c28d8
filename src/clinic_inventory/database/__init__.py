"""
Flat JSON table persistence.
"""

from .json_store import JsonStore, StoreTransaction, create_json_store

__all__ = ["JsonStore", "StoreTransaction", "create_json_store"]
