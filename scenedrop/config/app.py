"""Module: scenedrop.config.app

Date: 2026-10-19

Application-level configuration: app info, debug flags, logging settings.
"""

# =====================================
# APPLICATION INFORMATION
# =====================================

APP_NAME = "scenedrop"
APP_VERSION = "0.1.0"

# =====================================
# LOGGING CONFIGURATION
# =====================================

LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Console logging
LOG_TO_CONSOLE = True
LOG_CONSOLE_LEVEL = "INFO"

# File logging
LOG_TO_FILE = False
LOG_DIR = "logs"
LOG_FILE_MAX_BYTES = 10_000_000  # 10MB per file
LOG_FILE_BACKUP_COUNT = 5

# Development logging settings
SHOW_DEV_ONLY_IN_CONSOLE = False
