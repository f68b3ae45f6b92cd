# This package contains services that talk to the outside world.

from . import email_service

__all__ = [
    "email_service",
]
