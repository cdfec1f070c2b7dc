# Repository layer - in-process stores

from .alert_store import InMemoryAlertStore

__all__ = ["InMemoryAlertStore"]
