"""
clipurl package initializer.
"""

from . import analytics
from . import logsink
from . import manager
from . import middleware
from . import storage

__all__ = ["analytics", "logsink", "manager", "middleware", "storage"]
