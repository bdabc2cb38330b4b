"""
Shared State Module for system_utils package.
Holds process-wide trackers only; per-display state lives on LyricsEngine.

It imports NOTHING from the system_utils package to prevent circular imports.
"""
from __future__ import annotations

# ==========================================
# TASK TRACKING
# ==========================================

# Global set to track background tasks and prevent garbage collection
_background_tasks: set = set()
