"""Trello REST API client.

Implements the BoardService operations against https://api.trello.com/1.
Requests authenticate with the `key` and `token` query parameters.

API documentation: https://developer.atlassian.com/cloud/trello/rest/
"""

import logging
import time
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from ..core.exceptions import DataSourceError, RateLimitError, ResponseFormatError
from ..core.models import (
    AuthConfig,
    Board,
    BoardList,
    Card,
    CheckItem,
    Checklist,
)
from .base import BaseProvider

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_ACTIONS = {"GET": "fetch", "POST": "create", "DELETE": "delete"}


def _describe(e: ValidationError) -> str:
    err = e.errors()[0]
    location = ".".join(str(part) for part in err["loc"])
    return f"{location}: {err['msg']}" if location else err["msg"]


class TrelloClient(BaseProvider):
    """Talks to the Trello REST API."""

    SOURCE = "trello"
    BASE_URL = "https://api.trello.com/1"

    def __init__(
        self,
        auth: AuthConfig,
        base_url: str | None = None,
        timeout: float = 30.0,
        rate_limit_calls: int = 100,
        rate_limit_period: int = 10,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize Trello client.

        Args:
            auth: App key and token
            base_url: Override the API root (tests, proxies)
            timeout: Per-request timeout in seconds
            rate_limit_calls: Rate limit per period (Trello allows 100 per 10s per token)
            rate_limit_period: Period in seconds
            transport: Optional httpx transport, used by tests
        """
        super().__init__(
            rate_limit_calls=rate_limit_calls,
            rate_limit_period=rate_limit_period,
        )
        self.auth = auth
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make a rate-limited, authenticated request and return the decoded body."""
        self._wait_for_rate_limit()
        start_time = time.time()
        action = _ACTIONS.get(method, method.lower())

        query = {"key": self.auth.app_key, "token": self.auth.token}
        if params:
            query.update(params)

        url = f"{self.base_url}{endpoint}"

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.request(method, url, params=query)

            duration_ms = int((time.time() - start_time) * 1000)

            if response.status_code == 429:
                self._record_audit(
                    action=action,
                    endpoint=endpoint,
                    success=False,
                    error_message="Rate limit exceeded",
                    duration_ms=duration_ms,
                )
                retry_after = response.headers.get("Retry-After")
                raise RateLimitError(
                    source=self.SOURCE,
                    retry_after_seconds=int(retry_after) if retry_after and retry_after.isdigit() else None,
                    endpoint=endpoint,
                )

            response.raise_for_status()

            data = response.json() if response.content else None

            self._record_audit(
                action=action,
                endpoint=endpoint,
                success=True,
                duration_ms=duration_ms,
            )
            return data

        except httpx.HTTPStatusError as e:
            self._record_audit(
                action=action,
                endpoint=endpoint,
                success=False,
                error_message=f"HTTP {e.response.status_code}",
            )
            raise DataSourceError(
                source=self.SOURCE,
                message=f"HTTP {e.response.status_code}: {e.response.text.strip()[:200]}",
                endpoint=endpoint,
                status_code=e.response.status_code,
            )
        except httpx.RequestError as e:
            self._record_audit(
                action=action,
                endpoint=endpoint,
                success=False,
                error_message=str(e),
            )
            raise DataSourceError(
                source=self.SOURCE,
                message=str(e),
                endpoint=endpoint,
            )
        except ValueError as e:
            # Body was not JSON
            self._record_audit(
                action=action,
                endpoint=endpoint,
                success=False,
                error_message="Malformed response body",
            )
            raise ResponseFormatError(self.SOURCE, endpoint, str(e))

    def _parse(self, model: type[ModelT], data: Any, endpoint: str) -> ModelT:
        """Validate a decoded body against a model."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ResponseFormatError(self.SOURCE, endpoint, _describe(e))

    def _parse_many(self, model: type[ModelT], data: Any, endpoint: str) -> list[ModelT]:
        """Validate a decoded JSON array against a model."""
        try:
            return TypeAdapter(list[model]).validate_python(data)
        except ValidationError as e:
            raise ResponseFormatError(self.SOURCE, endpoint, _describe(e))

    def fetch_board(self, board_id: str) -> Board:
        endpoint = f"/boards/{board_id}"
        data = self._make_request("GET", endpoint, params={"fields": "id,name"})
        return self._parse(Board, data, endpoint)

    def fetch_lists(self, board: Board) -> list[BoardList]:
        endpoint = f"/boards/{board.id}/lists"
        data = self._make_request("GET", endpoint, params={"filter": "open"})
        return self._parse_many(BoardList, data, endpoint)

    def fetch_cards(self, board_list: BoardList) -> list[Card]:
        endpoint = f"/lists/{board_list.id}/cards"
        data = self._make_request("GET", endpoint, params={"fields": "id,name,url,idList"})
        return self._parse_many(Card, data, endpoint)

    def fetch_checklists(self, card: Card) -> list[Checklist]:
        endpoint = f"/cards/{card.id}/checklists"
        data = self._make_request("GET", endpoint, params={"checkItems": "all"})
        return self._parse_many(Checklist, data, endpoint)

    def create_checklist(self, card: Card, name: str) -> Checklist:
        endpoint = f"/cards/{card.id}/checklists"
        data = self._make_request("POST", endpoint, params={"name": name})
        checklist = self._parse(Checklist, data, endpoint)
        logger.debug(f"Created checklist '{name}' on card '{card.name}'")
        return checklist

    def create_checklist_item(self, checklist: Checklist, label: str) -> CheckItem:
        endpoint = f"/checklists/{checklist.id}/checkItems"
        data = self._make_request("POST", endpoint, params={"name": label})
        return self._parse(CheckItem, data, endpoint)

    def delete_checklist_item(self, item: CheckItem) -> None:
        endpoint = f"/checklists/{item.checklist_id}/checkItems/{item.id}"
        self._make_request("DELETE", endpoint)
