"""Module: scenedrop

Date: 2026-10-19

Spatial drag & drop resolution and document-patch engine for scene graphs
made of auto-layout containers and expanded component instances.
"""

__version__ = "0.1.0"
