from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

import httpx

from ..common.datetime_utils import format_iso_date
from ..core.constants import (
    DEFAULT_FETCH_FAILED_MESSAGE,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_SAVE_FAILED_MESSAGE,
    DEFAULT_SAVE_SUCCESS_MESSAGE,
)
from ..core.enums import SubjectKind
from ..core.exceptions import RemoteError
from .gateway import AttendanceGateway
from .model import AttendanceRecord, FetchQuery, SubmitBatch, SubmitResult

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or fallback)
    return fallback


def _records_of(body: Any) -> list[AttendanceRecord]:
    items = body.get("records", body.get("data", [])) if isinstance(body, dict) else body
    return [AttendanceRecord.from_dict(item) for item in items or []]


class HttpAttendanceGateway(AttendanceGateway):
    """Talks to the attendance API over HTTP.

    Non-2xx responses raise `RemoteError` with the server's ``message``;
    transport failures and timeouts raise `RemoteError` with a generic one.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        client: Optional[httpx.Client] = None,
    ):
        self._client = client or httpx.Client(base_url=base_url, timeout=httpx.Timeout(timeout))

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpAttendanceGateway":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def _path(kind: SubjectKind) -> str:
        return f"/api/{SubjectKind(kind).value}-attendance"

    def _send(self, method: str, url: str, fallback: str, **kwargs) -> Any:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("attendance request %s %s failed: %s", method, url, e)
            raise RemoteError(fallback) from e

        if response.is_error:
            message = _error_message(response, fallback)
            logger.error("attendance request %s %s -> %s: %s", method, url, response.status_code, message)
            raise RemoteError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(fallback, status_code=response.status_code) from e

    def fetch(self, query: FetchQuery) -> Sequence[AttendanceRecord]:
        body = self._send("GET", self._path(query.kind), DEFAULT_FETCH_FAILED_MESSAGE, params=query.to_params())
        return _records_of(body)

    def submit(self, batch: SubmitBatch) -> SubmitResult:
        body = self._send("POST", self._path(batch.kind), DEFAULT_SAVE_FAILED_MESSAGE, json=batch.to_payload())
        message = body.get("message") if isinstance(body, dict) else None
        return SubmitResult(message=message or DEFAULT_SAVE_SUCCESS_MESSAGE, records=tuple(_records_of(body)))

    def delete(self, *, kind: SubjectKind, subject_id: str, work_date: date) -> bool:
        self._send(
            "DELETE",
            self._path(kind),
            "Failed to delete attendance",
            params={"subject_id": subject_id, "date": format_iso_date(work_date)},
        )
        return True
