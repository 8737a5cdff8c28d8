"""
HTTP interface for the clinic inventory tracker.
"""

from .app import app, init_api

__all__ = ["app", "init_api"]
