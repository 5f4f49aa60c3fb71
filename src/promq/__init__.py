# promq - PromQL completion engine
"""
promq completes partially typed PromQL queries: it works out what is
being typed at the cursor and offers grammar terms, snippets and
metadata from Prometheus or a language server.
"""

from promq.version import __version__
from promq.session import PromQLSession, new_complete_strategy

__all__ = [
    "__version__",
    "PromQLSession",
    "new_complete_strategy",
]
