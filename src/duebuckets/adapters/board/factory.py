"""Factory helpers for board clients."""

from __future__ import annotations

import requests

from duebuckets.ports.board import BoardClient
from duebuckets.settings import BoardSettings, SettingsError

from .snapshot import SnapshotBoardClient
from .trello import TrelloAuthConfig, TrelloBoardClient


def build_board_client(config: BoardSettings, *, session: requests.Session | None = None) -> BoardClient:
    if config.type == "snapshot":
        if config.path is None:
            raise SettingsError("snapshot board requires board.path")
        return SnapshotBoardClient(config.path, write_back=config.write_back)
    if config.type == "trello":
        if not config.board_id:
            raise SettingsError("trello board requires board.board_id or TRELLO_BOARD_ID")
        return TrelloBoardClient(
            config.board_id,
            TrelloAuthConfig(api_key=config.api_key, token=config.token),
            base_url=config.base_url,
            timeout=config.request_timeout,
            session=session,
        )
    raise SettingsError(f"board type '{config.type}' not supported")


__all__ = ["build_board_client"]
