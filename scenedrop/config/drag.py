"""Module: scenedrop.config.drag

Date: 2026-10-19

Drop engine thresholds and behaviour flags.

Pixel values are screen pixels; the engine divides them by the canvas zoom
to get world units.
"""

# =====================================
# IDENTIFIERS
# =====================================

# Joins an instance's expanded id and a local document id.
# Must never appear inside a document id.
EXPANDED_ID_SEPARATOR = "::"

# =====================================
# GESTURE
# =====================================

# Pointer travel before a pressed node turns into a drag
DRAG_START_THRESHOLD_PX = 5

# =====================================
# DROP PREVIEW
# =====================================

# Cursor must pass a slot boundary by this much before the index changes
HYSTERESIS_PX = 8.0

# Insertion line thickness
INDICATOR_THICKNESS_PX = 2.0

# Insertion line is widened to at least this size before clipping
MIN_INDICATOR_SIZE_PX = 6.0

# Hit-testing ignores the whole subtree of every dragged node
EXCLUDE_DRAGGED_SUBTREES = True

# Siblings are nudged aside for reparent drops too, not only for reorders
REFLOW_ON_REPARENT = True

# Keep targeting the origin parent while the cursor stays inside its content box
ORIGIN_STICKINESS_ENABLED = True

# =====================================
# DEBUG
# =====================================

# Dump every computed preview through DragDebugLogger
DRAG_DROP_DEBUG = False

# Minimum interval between two throttled debug dumps
DEBUG_LOG_THROTTLE_MS = 100
