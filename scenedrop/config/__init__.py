"""Module: scenedrop.config

Date: 2026-10-19

Configuration package for scenedrop.

This package organizes configuration into logical modules:
- app: Application info, debug flags, logging
- drag: Drop engine thresholds and behaviour flags

All settings are re-exported from this module:
    from scenedrop.config import HYSTERESIS_PX, SHOW_DEV_ONLY_IN_CONSOLE
"""

from scenedrop.config.app import *  # noqa: F401, F403
from scenedrop.config.drag import *  # noqa: F401, F403
