"""Configuration and logging utilities."""
from .config import Config
from .logger import GestureLogger, setup_logging

__all__ = ["Config", "GestureLogger", "setup_logging"]
