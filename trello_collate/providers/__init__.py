"""Remote board services.

This module contains:
- BoardService: the operations the reconciliation core relies on
- BaseProvider: rate limiting and audit trail for HTTP-backed services
- TrelloClient: the Trello REST implementation
"""

from .base import BaseProvider, BoardService
from .trello import TrelloClient

__all__ = ["BaseProvider", "BoardService", "TrelloClient"]
