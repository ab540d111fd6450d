# hotel_services/models/__init__.py

from .service import Service
from .service_usage import ServiceUsage

__all__ = [
    "Service",
    "ServiceUsage",
]
