"""
Runtime configuration: built-in defaults overlaid with config/config.yaml.

The defaults below are the recognition policy the product ships with; the
YAML file only needs to name what it changes. Values whose type disagrees
with the default are reported at load time but still used, so a bad edit
shows up in the log instead of as a crash.
"""

import copy
import os
import yaml
import logging

logger = logging.getLogger(__name__)

_BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
DEFAULT_CONFIG_PATH = os.path.join(_BASE_DIR, "config", "config.yaml")

DEFAULTS = {
    "camera": {
        "device_id": 0,
        "width": 640,
        "height": 480,
        "fps": 30,
        "flip_horizontal": True,
    },
    "mediapipe": {
        "max_num_hands": 1,
        "model_complexity": 1,
        "min_detection_confidence": 0.8,
        "min_tracking_confidence": 0.8,
    },
    "recognition": {
        "commit_threshold": 15,
        "confidence_min_count": 5,
        "confidence_scale": 15,
        "max_live_confidence": 95,
        "decay_per_frame": 0.5,
        "retrigger_window_ms": 5000,
    },
    "output": {
        "language": "english",
    },
    "logging": {
        "level": "INFO",
        "file": None,
        "max_size_mb": 10,
        "backup_count": 3,
    },
    "visualization": {
        "window_name": "SignSense",
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _type_problems(defaults: dict, data: dict, prefix: str = "") -> list:
    """Compare loaded values with the types of their defaults."""
    problems = []
    for key, default in defaults.items():
        if key not in data:
            continue
        value = data[key]
        path = f"{prefix}{key}"
        if isinstance(default, dict):
            if isinstance(value, dict):
                problems.extend(_type_problems(default, value, path + "."))
            else:
                problems.append(f"Section '{path}' should be a mapping, got {type(value).__name__}")
        elif default is None or value is None:
            continue
        elif isinstance(default, bool) or isinstance(value, bool):
            if type(value) is not type(default):
                problems.append(f"{path}: expected {type(default).__name__}, got {value!r}")
        elif isinstance(default, float):
            if not isinstance(value, (int, float)):
                problems.append(f"{path}: expected a number, got {value!r}")
        elif not isinstance(value, type(default)):
            problems.append(f"{path}: expected {type(default).__name__}, got {value!r}")
    return problems


class Config:
    """Singleton configuration manager."""

    _instance = None
    _data = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._data = copy.deepcopy(DEFAULTS)
        return cls._instance

    def load(self, config_path=None):
        """Read a YAML file over the defaults. A missing file leaves the defaults.

        Raises:
            yaml.YAMLError: the file exists but is not valid YAML
        """
        config_path = config_path or DEFAULT_CONFIG_PATH
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
            logger.info("Loaded config from %s", config_path)
        except FileNotFoundError:
            logger.warning("Config file not found: %s, using defaults", config_path)
            loaded = {}
        return self.load_dict(loaded)

    def load_dict(self, data: dict):
        """Overlay an in-memory mapping on the defaults."""
        data = data or {}
        if isinstance(data, dict):
            self._problems = _type_problems(DEFAULTS, data)
        else:
            self._problems = [f"top level: expected a mapping, got {type(data).__name__}"]
            data = {}
        for problem in self._problems:
            logger.warning("Config validation: %s", problem)
        # A non-mapping section cannot be merged; keep its defaults
        usable = {k: v for k, v in data.items()
                  if not (isinstance(DEFAULTS.get(k), dict) and not isinstance(v, dict))}
        self._data = _deep_merge(DEFAULTS, usable)
        return self

    @property
    def problems(self) -> list:
        """Validation messages from the last load."""
        return list(getattr(self, "_problems", ()))

    def get(self, key_path: str, default=None):
        """Nested value by dotted path, e.g. 'camera.width'."""
        node = self._data
        for key in key_path.split("."):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def override(self, key_path: str, value):
        """Set a nested value (command-line overrides)."""
        *parents, leaf = key_path.split(".")
        node = self._data
        for key in parents:
            node = node.setdefault(key, {})
        node[leaf] = value
        logger.debug("Config override %s = %r", key_path, value)

    def get_section(self, section: str) -> dict:
        value = self._data.get(section)
        return value if isinstance(value, dict) else {}

    @property
    def camera(self) -> dict:
        return self.get_section("camera")

    @property
    def mediapipe(self) -> dict:
        return self.get_section("mediapipe")

    @property
    def recognition(self) -> dict:
        return self.get_section("recognition")

    @property
    def output(self) -> dict:
        return self.get_section("output")

    @property
    def visualization(self) -> dict:
        return self.get_section("visualization")

    @property
    def base_dir(self) -> str:
        return _BASE_DIR

    @classmethod
    def reset(cls):
        """Reset singleton instance (for testing)."""
        cls._instance = None
        cls._data = {}
