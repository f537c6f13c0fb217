from studio_scheduler.models.estimate import EstimateRecord
from studio_scheduler.models.team_member import TeamMemberRecord
from studio_scheduler.models.scheduled_event import ScheduledEventRecord
from studio_scheduler.models.assignment import AssignmentRecord
from studio_scheduler.models.deliverable import DeliverableRecord
from studio_scheduler.models.notification import NotificationRecord

__all__ = [
    "EstimateRecord",
    "TeamMemberRecord",
    "ScheduledEventRecord",
    "AssignmentRecord",
    "DeliverableRecord",
    "NotificationRecord",
]
