"""Board client adapters."""

from .factory import build_board_client
from .snapshot import SnapshotBoardClient
from .trello import TrelloAuthConfig, TrelloBoardClient

__all__ = ["SnapshotBoardClient", "TrelloAuthConfig", "TrelloBoardClient", "build_board_client"]
