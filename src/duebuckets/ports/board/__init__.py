"""Board client port exports."""

from .client import BoardClient, BoardList, MoveError, MoveResult, MoveSuccess, TransportError

__all__ = ["BoardClient", "BoardList", "MoveError", "MoveResult", "MoveSuccess", "TransportError"]
