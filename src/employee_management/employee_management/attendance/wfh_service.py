from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty
from ..core.enums import RequestStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import WfhRequest
from .repository import WfhRequestRepository

logger = logging.getLogger(__name__)


class WfhRequestService:
    """Work from home is granted per day by an admin, never self-declared at check-in."""

    def __init__(self, requests: WfhRequestRepository):
        self._requests = requests

    def request(self, *, employee_id: int, work_date: date, reason: str) -> int:
        reason = require_non_empty(reason, "Reason")
        if self._requests.find_for_date(int(employee_id), work_date):
            raise ConflictError("WFH request already submitted for this date")
        return self._requests.create(employee_id=int(employee_id), work_date=work_date, reason=reason)

    def _decide(self, request_id: int, status: RequestStatus, *, admin_id: int, comment: str, now) -> WfhRequest:
        request = self._requests.get(int(request_id))
        if not request:
            raise NotFoundError("WFH request not found")
        if not self._requests.decide(
            request_id=request.request_id,
            status=status,
            decided_by=int(admin_id),
            decided_at=now or now_local(),
            admin_comment=(comment or "").strip() or None,
        ):
            raise ValidationError("WFH request is not in pending state")
        logger.info("WFH request %s %s by %s", request.request_id, status.value.lower(), admin_id)
        return self._requests.get(request.request_id)

    def approve(self, request_id: int, *, admin_id: int, comment: str = "", now: datetime | None = None) -> WfhRequest:
        return self._decide(request_id, RequestStatus.APPROVED, admin_id=admin_id, comment=comment, now=now)

    def reject(self, request_id: int, *, admin_id: int, comment: str = "", now: datetime | None = None) -> WfhRequest:
        return self._decide(request_id, RequestStatus.REJECTED, admin_id=admin_id, comment=comment, now=now)

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[WfhRequest]:
        status_enum = require_enum(RequestStatus, status, "Status") if status else None
        return self._requests.list_requests(employee_id=employee_id, status=status_enum, limit=limit)
