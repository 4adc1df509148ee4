"""Pydantic data models for trello-collate.

Remote models mirror the Trello REST payloads: they accept Trello's JSON
field names through aliases and ignore fields the tool does not use. All
models are immutable (frozen) after creation; a model never holds a
reference back to the client that fetched it.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from .types import BoardErrorPolicy, BucketKey, CheckItemState


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


REMOTE_MODEL_CONFIG = {"frozen": True, "populate_by_name": True, "extra": "ignore"}


class Board(BaseModel):
    """A Trello board."""

    id: str
    name: str = ""

    model_config = REMOTE_MODEL_CONFIG


class BoardList(BaseModel):
    """A list (column) on a board."""

    id: str
    name: str
    board_id: str | None = Field(default=None, alias="idBoard")

    model_config = REMOTE_MODEL_CONFIG


class Card(BaseModel):
    """A card; its title may carry bracketed bucket tags."""

    id: str
    name: str
    url: str
    list_id: str | None = Field(default=None, alias="idList")

    model_config = REMOTE_MODEL_CONFIG


class CheckItem(BaseModel):
    """A checklist item. The name is its identity within the checklist."""

    id: str
    name: str
    state: CheckItemState = CheckItemState.INCOMPLETE
    checklist_id: str = Field(alias="idChecklist")

    model_config = REMOTE_MODEL_CONFIG

    @property
    def is_checked(self) -> bool:
        return self.state == CheckItemState.COMPLETE


class Checklist(BaseModel):
    """A named checklist on a card."""

    id: str
    name: str
    card_id: str | None = Field(default=None, alias="idCard")
    check_items: list[CheckItem] = Field(default_factory=list, alias="checkItems")

    model_config = REMOTE_MODEL_CONFIG


class BoardConfig(BaseModel):
    """One configured board."""

    id: str
    name: str | None = None

    model_config = {"frozen": True, "coerce_numbers_to_str": True}

    @property
    def display_name(self) -> str:
        return self.name or self.id


class CollateConfig(BaseModel):
    """Boards to process and the source columns to scan for tagged cards."""

    boards: list[BoardConfig] = Field(default_factory=list)
    columns: list[str] = Field(default_factory=list)
    on_board_error: BoardErrorPolicy = BoardErrorPolicy.ABORT

    model_config = {"frozen": True}

    @field_validator("columns")
    @classmethod
    def validate_columns(cls, v: list[str]) -> list[str]:
        """Reject blank column names."""
        for column in v:
            if not column.strip():
                raise ValueError("column names must not be blank")
        return v


class AuthConfig(BaseModel):
    """Trello API credentials."""

    app_key: str = Field(alias="appkey")
    token: str

    model_config = {"frozen": True, "populate_by_name": True, "coerce_numbers_to_str": True}

    def __repr__(self) -> str:
        return f"AuthConfig(app_key='{self.app_key[:4]}...', token='***')"


class AuditEntry(BaseModel):
    """Audit trail entry for one remote call."""

    timestamp: datetime = Field(default_factory=_utcnow)
    action: str  # "fetch", "create", "delete"
    endpoint: str | None = None
    success: bool = True
    error_message: str | None = None
    duration_ms: int | None = None

    model_config = {"frozen": True}


class ReconcileResult(BaseModel):
    """Mutations applied to one checklist by one reconciliation."""

    card_id: str
    card_name: str
    checklist_name: str
    checklist_id: str
    checklist_created: bool = False
    created: list[str] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def mutation_count(self) -> int:
        return len(self.created) + len(self.deleted) + int(self.checklist_created)

    @property
    def is_noop(self) -> bool:
        """True when the checklist already matched the desired labels."""
        return self.mutation_count == 0


class BoardResult(BaseModel):
    """Outcome of processing a single board."""

    board_id: str
    board_name: str
    success: bool = True
    error: str | None = None
    buckets: dict[BucketKey, int] = Field(default_factory=dict)  # bucket -> member count
    unknown_buckets: list[BucketKey] = Field(default_factory=list)
    reconciliations: list[ReconcileResult] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def mutation_count(self) -> int:
        return sum(r.mutation_count for r in self.reconciliations)


class PassResult(BaseModel):
    """Outcome of one sweep over every configured board."""

    started_at: datetime = Field(default_factory=_utcnow)
    finished_at: datetime | None = None
    boards: list[BoardResult] = Field(default_factory=list)
    aborted: bool = False
    api_calls: list[AuditEntry] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def success(self) -> bool:
        return not self.aborted and all(b.success for b in self.boards)

    @property
    def mutation_count(self) -> int:
        return sum(b.mutation_count for b in self.boards)

    @property
    def duration_seconds(self) -> float | None:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()
