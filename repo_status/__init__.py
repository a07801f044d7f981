"""
Scheduled check of a working directory's git state.

Looks for uncommitted changes, fetches the tracked remote and reports
commits that exist only on one side.
"""

__version__ = "0.3.0"
