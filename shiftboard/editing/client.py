"""Async HTTP backend for the synchronizer, speaking the shift board REST API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from shiftboard.errors import ScheduleError

from .state import AssignmentView, CreateAssignment

_WIRE_NAMES = {
    "start_min": "startMin",
    "end_min": "endMin",
    "break_min": "breakMin",
    "break_start_min": "breakStartMin",
    "note": "note",
}


class RemoteError(ScheduleError):
    """The server rejected the request."""

    def __init__(self, reason: str, message: str, status_code: int):
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code


class ScheduleClient:
    """
    Thin wrapper over ``httpx.AsyncClient`` acting as the caller's identity.

    Pass ``transport=httpx.ASGITransport(app=...)`` to talk to an in-process
    app instead of the network.
    """

    def __init__(
        self,
        base_url: str,
        staff_id: int,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        kwargs: Dict[str, Any] = {"base_url": base_url, "headers": {"X-Staff-Id": str(staff_id)}}
        if transport is not None:
            kwargs["transport"] = transport
        if timeout is not None:
            kwargs["timeout"] = timeout
        self._http = httpx.AsyncClient(**kwargs)

    async def __aenter__(self) -> "ScheduleClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @staticmethod
    def _check(response: httpx.Response) -> Dict[str, Any]:
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            raise RemoteError(
                reason=body.get("reason", f"HTTP{response.status_code}"),
                message=body.get("error") or response.text or response.reason_phrase,
                status_code=response.status_code,
            )
        return response.json()

    async def list_assignments(self, period_id: int) -> List[AssignmentView]:
        body = self._check(await self._http.get("/assignments", params={"periodId": period_id}))
        return [AssignmentView.from_payload(item) for item in body["assignments"]]

    async def create_assignment(self, period_id: int, intent: CreateAssignment) -> AssignmentView:
        payload = {
            "periodId": period_id,
            "staffId": intent.staff_id,
            "date": intent.date.isoformat(),
            "startMin": intent.start_min,
            "endMin": intent.end_min,
        }
        body = self._check(await self._http.post("/assignments", json=payload))
        return AssignmentView.from_payload(body["assignment"])

    async def update_assignment(self, assignment_id: int, changes: Dict) -> AssignmentView:
        payload = {_WIRE_NAMES[key]: value for key, value in changes.items()}
        body = self._check(await self._http.patch(f"/assignments/{assignment_id}", json=payload))
        return AssignmentView.from_payload(body["assignment"])

    async def delete_assignment(self, assignment_id: int) -> None:
        self._check(await self._http.delete(f"/assignments/{assignment_id}"))
