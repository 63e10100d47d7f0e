"""Operator check of the configured list mapping against the board's lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from duebuckets.domain.buckets import Bucket, ListMapping
from duebuckets.ports.board import BoardClient, BoardList


@dataclass(frozen=True)
class ListMappingReport:
    lists: List[BoardList]
    mapping: ListMapping
    unmapped: List[Bucket]
    unknown: Dict[Bucket, str]

    @property
    def ok(self) -> bool:
        return not self.unmapped and not self.unknown

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lists": [entry.to_dict() for entry in self.lists],
            "mapping": self.mapping.to_dict(),
            "unmapped": [bucket.value for bucket in self.unmapped],
            "unknown": {bucket.value: list_id for bucket, list_id in self.unknown.items()},
            "ok": self.ok,
        }


def check_list_mapping(client: BoardClient, mapping: ListMapping) -> ListMappingReport:
    """Compare ``mapping`` with the lists on the board.

    Raises :class:`~duebuckets.ports.board.TransportError` when the lists
    cannot be fetched.
    """

    lists = list(client.list_board_lists())
    board_ids = {entry.id for entry in lists}
    unknown = {
        bucket: list_id
        for bucket, list_id in mapping.entries.items()
        if list_id not in board_ids
    }
    return ListMappingReport(lists=lists, mapping=mapping, unmapped=mapping.missing(), unknown=unknown)
