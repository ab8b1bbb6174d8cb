"""
Domain utilities module.

Provides shared utilities for the domain layer that remain
independent of infrastructure concerns.
"""

from .concurrency import fan_out, run_blocking
from .uuid7 import uuid7

__all__ = ["fan_out", "run_blocking", "uuid7"]
