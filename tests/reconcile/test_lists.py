from __future__ import annotations

from typing import Sequence

import pytest

from duebuckets.app.reconcile import check_list_mapping
from duebuckets.domain.buckets import Bucket, Card, ListMapping
from duebuckets.ports.board import BoardClient, BoardList, MoveResult, TransportError


class ListsOnlyBoard(BoardClient):
    def __init__(self, lists: Sequence[BoardList] | None = None) -> None:
        self._lists = lists

    def list_cards(self) -> Sequence[Card]:
        raise AssertionError("not used")

    def move_card(self, card_id: str, list_id: str) -> MoveResult:
        raise AssertionError("not used")

    def list_board_lists(self) -> Sequence[BoardList]:
        if self._lists is None:
            raise TransportError("HTTP 404")
        return self._lists


def test_report_flags_unknown_and_unmapped() -> None:
    board = ListsOnlyBoard([BoardList("L1", "Overdue"), BoardList("L2", "Today")])
    mapping = ListMapping(entries={Bucket.OVERDUE: "L1", Bucket.TODAY: "L2", Bucket.LATER: "gone"})

    report = check_list_mapping(board, mapping)

    assert report.ok is False
    assert report.unknown == {Bucket.LATER: "gone"}
    assert report.unmapped == [Bucket.TOMORROW, Bucket.THIS_WEEK, Bucket.NEXT_WEEK]
    payload = report.to_dict()
    assert payload["unknown"] == {"Later": "gone"}
    assert payload["lists"][0] == {"id": "L1", "name": "Overdue"}


def test_report_ok_when_complete() -> None:
    lists = [BoardList(f"L{index}", bucket.value) for index, bucket in enumerate(Bucket)]
    mapping = ListMapping(entries={bucket: f"L{index}" for index, bucket in enumerate(Bucket)})

    assert check_list_mapping(ListsOnlyBoard(lists), mapping).ok is True


def test_transport_error_propagates() -> None:
    with pytest.raises(TransportError):
        check_list_mapping(ListsOnlyBoard(), ListMapping())
