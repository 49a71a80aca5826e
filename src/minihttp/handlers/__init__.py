"""
=============================================================================
BUILT-IN HANDLERS
=============================================================================

    WebsiteHandler   Serves text files from a public directory (GET only).

Applications usually write their own Handler subclass instead; this one
backs `python -m minihttp`.

=============================================================================
"""

from .website import WebsiteHandler

__all__ = [
    "WebsiteHandler",
]
