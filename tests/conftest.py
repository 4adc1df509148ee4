"""Pytest configuration and fixtures for trello-collate tests."""

import itertools
from pathlib import Path

import pytest

from trello_collate.core.exceptions import DataSourceError
from trello_collate.core.models import (
    Board,
    BoardList,
    Card,
    CheckItem,
    Checklist,
    CollateConfig,
)
from trello_collate.core.types import CheckItemState
from trello_collate.providers.base import BoardService

MUTATING_CALLS = {"create_checklist", "create_checklist_item", "delete_checklist_item"}


class FakeBoardService(BoardService):
    """In-memory board service that records every call."""

    def __init__(self):
        self.boards: dict[str, Board] = {}
        self.lists: dict[str, list[BoardList]] = {}
        self.cards: dict[str, list[Card]] = {}
        self.checklists: dict[str, list[Checklist]] = {}
        self.calls: list[tuple[str, str]] = []
        # (method, object id) or method -> exception raised on that call
        self.failures: dict = {}
        self._ids = itertools.count(1)

    # Setup helpers

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}{next(self._ids)}"

    def add_board(self, name: str, board_id: str | None = None) -> Board:
        board = Board(id=board_id or self._next_id("b"), name=name)
        self.boards[board.id] = board
        self.lists[board.id] = []
        return board

    def add_list(self, board: Board, name: str) -> BoardList:
        board_list = BoardList(id=self._next_id("l"), name=name, board_id=board.id)
        self.lists[board.id].append(board_list)
        self.cards[board_list.id] = []
        return board_list

    def add_card(self, board_list: BoardList, name: str) -> Card:
        card_id = self._next_id("c")
        card = Card(
            id=card_id,
            name=name,
            url=f"https://trello.com/c/{card_id}",
            list_id=board_list.id,
        )
        self.cards[board_list.id].append(card)
        self.checklists[card.id] = []
        return card

    def add_checklist(
        self,
        card: Card,
        name: str,
        items: list[str] | None = None,
        checked: set[str] | None = None,
    ) -> Checklist:
        checklist_id = self._next_id("cl")
        checked = checked or set()
        check_items = [
            CheckItem(
                id=self._next_id("i"),
                name=label,
                checklist_id=checklist_id,
                state=CheckItemState.COMPLETE if label in checked else CheckItemState.INCOMPLETE,
            )
            for label in items or []
        ]
        checklist = Checklist(id=checklist_id, name=name, card_id=card.id, check_items=check_items)
        self.checklists[card.id].append(checklist)
        return checklist

    # Inspection helpers

    def get_checklist(self, card: Card, name: str) -> Checklist | None:
        for checklist in self.checklists[card.id]:
            if checklist.name == name:
                return checklist
        return None

    def item_labels(self, card: Card, name: str) -> list[str]:
        checklist = self.get_checklist(card, name)
        assert checklist is not None, f"no checklist '{name}' on {card.name}"
        return [item.name for item in checklist.check_items]

    @property
    def mutation_count(self) -> int:
        return sum(1 for method, _ in self.calls if method in MUTATING_CALLS)

    def reset_calls(self) -> None:
        self.calls.clear()

    # BoardService

    def _call(self, method: str, object_id: str) -> None:
        self.calls.append((method, object_id))
        exc = self.failures.get((method, object_id)) or self.failures.get(method)
        if exc is not None:
            raise exc

    def _replace(self, checklist: Checklist) -> None:
        for card_id, checklists in self.checklists.items():
            for i, existing in enumerate(checklists):
                if existing.id == checklist.id:
                    checklists[i] = checklist
                    return
        raise DataSourceError("fake", "checklist not found", status_code=404)

    def _find_checklist(self, checklist_id: str) -> Checklist:
        for checklists in self.checklists.values():
            for checklist in checklists:
                if checklist.id == checklist_id:
                    return checklist
        raise DataSourceError("fake", "checklist not found", status_code=404)

    def fetch_board(self, board_id: str) -> Board:
        self._call("fetch_board", board_id)
        if board_id not in self.boards:
            raise DataSourceError("fake", "board not found", status_code=404)
        return self.boards[board_id]

    def fetch_lists(self, board: Board) -> list[BoardList]:
        self._call("fetch_lists", board.id)
        return list(self.lists[board.id])

    def fetch_cards(self, board_list: BoardList) -> list[Card]:
        self._call("fetch_cards", board_list.id)
        return list(self.cards[board_list.id])

    def fetch_checklists(self, card: Card) -> list[Checklist]:
        self._call("fetch_checklists", card.id)
        return list(self.checklists[card.id])

    def create_checklist(self, card: Card, name: str) -> Checklist:
        self._call("create_checklist", card.id)
        checklist = Checklist(id=self._next_id("cl"), name=name, card_id=card.id)
        self.checklists[card.id].append(checklist)
        return checklist

    def create_checklist_item(self, checklist: Checklist, label: str) -> CheckItem:
        self._call("create_checklist_item", checklist.id)
        current = self._find_checklist(checklist.id)
        item = CheckItem(id=self._next_id("i"), name=label, checklist_id=checklist.id)
        self._replace(current.model_copy(update={"check_items": [*current.check_items, item]}))
        return item

    def delete_checklist_item(self, item: CheckItem) -> None:
        self._call("delete_checklist_item", item.id)
        current = self._find_checklist(item.checklist_id)
        remaining = [i for i in current.check_items if i.id != item.id]
        if len(remaining) == len(current.check_items):
            raise DataSourceError("fake", "check item not found", status_code=404)
        self._replace(current.model_copy(update={"check_items": remaining}))


@pytest.fixture
def service() -> FakeBoardService:
    """Empty in-memory board service."""
    return FakeBoardService()


@pytest.fixture
def scenario(service: FakeBoardService) -> dict:
    """
    Board with "Work Buckets" (Foo, None) and "To Do" ("[foo] A", "B").
    """
    board = service.add_board("Team", board_id="board-1")
    work_buckets = service.add_list(board, "Work Buckets")
    todo = service.add_list(board, "To Do")
    return {
        "board": board,
        "foo": service.add_card(work_buckets, "Foo"),
        "none": service.add_card(work_buckets, "None"),
        "a": service.add_card(todo, "[foo] A"),
        "b": service.add_card(todo, "B"),
        "todo": todo,
        "work_buckets": work_buckets,
    }


@pytest.fixture
def scenario_config() -> CollateConfig:
    """Config for the scenario board."""
    return CollateConfig(boards=[{"id": "board-1", "name": "Team"}], columns=["To Do"])


@pytest.fixture
def write_yaml(tmp_path: Path):
    """Write a YAML string to a temp file and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
