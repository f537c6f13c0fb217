from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studio_scheduler.database import get_db
from studio_scheduler.dependencies import get_dispatcher
from studio_scheduler.schemas.notification import (
    DeliveryStatus,
    DispatchResponse,
    NotificationCommand,
)
from studio_scheduler.services.notification_service import (
    NotificationDispatcher,
    dispatch_pending,
    list_notifications,
    queue_reminders,
    retry_failed,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationCommand])
async def outbox(status: DeliveryStatus | None = None, db: Session = Depends(get_db)):
    return list_notifications(db, status)


@router.post("/reminders", response_model=list[NotificationCommand])
async def queue_event_reminders(as_of: date | None = None, db: Session = Depends(get_db)):
    return queue_reminders(db, as_of)


@router.post("/dispatch", response_model=DispatchResponse)
async def dispatch(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    sent, failed = dispatch_pending(db, dispatcher)
    return DispatchResponse(sent=sent, failed=failed)


@router.post("/retry")
async def requeue_failed(db: Session = Depends(get_db)):
    return {"requeued": retry_failed(db)}
