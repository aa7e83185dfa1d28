"""Session analytics."""
from .analytics import Analytics

__all__ = ["Analytics"]
