# activity/models/__init__.py

from .activity import Activity

__all__ = [
    "Activity",
]
