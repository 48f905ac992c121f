"""Module: scenedrop.utils

Date: 2026-10-19

Shared utilities: logging helpers and the Qt-free observer pattern.
"""
