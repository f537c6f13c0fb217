from typing import Literal

from pydantic import BaseModel

NotificationKind = Literal["assignment", "reminder"]
DeliveryStatus = Literal["pending", "sent", "failed"]

class NotificationCommand(BaseModel):
    id: str
    kind: NotificationKind
    event_id: str
    team_member_id: str
    recipient: str
    message: str
    status: DeliveryStatus = "pending"
    attempts: int = 0
    last_error: str | None = None
    created_at: str | None = None
    sent_at: str | None = None


class DispatchResponse(BaseModel):
    sent: int
    failed: int
