#!/usr/bin/env python3
# replscope/config/__init__.py
from __future__ import annotations

"""
Package for session configuration.

Provides:
- Layered configuration loader (defaults, files, REPLSCOPE_* environment).
- `AppConfig` consumed by the run loop, the line readers and logging setup.
"""


from .config import (
    AppConfig,
    DEFAULTS,
    DEFAULT_CONFIG,
    ENV_PREFIX,
    INTERRUPT_ACTIONS,
    config_from_mapping,
    load_config,
)

__all__ = [
    "AppConfig",
    "DEFAULTS",
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "INTERRUPT_ACTIONS",
    "config_from_mapping",
    "load_config",
]
