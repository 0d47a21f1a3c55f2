"""
gitadd - interactive add/reset for a git working tree.

Shows every changed path with its staged and unstaged state and line counts,
and stages or unstages files one at a time or in bulk.
"""

__version__ = "1.0.0"

from gitadd.core import GitAdd
from gitadd.config.settings import Settings

__all__ = ["GitAdd", "Settings"]
