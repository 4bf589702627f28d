"""VibeCode Pulse package bootstrap.

Grounded news aggregation for AI developer tools: model replies are parsed
into records, links are verified against search citations, and batches are
merged into a persisted feed history.

Updates: v0.1 - 2025-11-20 - Created package scaffold.
"""

from .main import main

__all__ = ["main"]
