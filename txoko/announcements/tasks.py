from celery import shared_task

from txoko.announcements.models import Announcement
from txoko.announcements.services import fan_out


@shared_task(name="announcements.fan_out")
def fan_out_announcement(announcement_id: int) -> int:
    """Notify every member of the announcement's society.

    Returns:
        Number of notifications created (0 if the announcement is gone or
        inactive by the time the task runs).
    """
    announcement = (
        Announcement.objects.filter(pk=announcement_id, is_active=True)
        .prefetch_related("messages")
        .first()
    )
    if announcement is None:
        return 0
    return fan_out(announcement)
