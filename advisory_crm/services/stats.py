"""
Dashboard statistics.

Nothing is cached: every call recomputes from the stored rows as of ``now``.
"""
import math
from datetime import datetime, timedelta

from sqlmodel import Session, col, func, or_, select

from advisory_crm.models.client import Client
from advisory_crm.models.project import Project, ProjectStatus
from advisory_crm.schemas.client import ClientStats
from advisory_crm.schemas.project import ProjectStats, RecentActivity

KNOWN_STATUSES = [status.value for status in ProjectStatus]
FOLLOWUP_WINDOW = timedelta(days=7)
RECENT_ACTIVITY_LIMIT = 5
ACTIVITY_TIMESTAMP_FORMAT = "%b %d, %Y %H:%M"


def completion_rate(completed: int, total: int) -> int:
    """Percentage of completed projects, rounded half up; 0 when there are none."""
    if total <= 0:
        return 0
    return int(math.floor(completed * 100 / total + 0.5))


def _count_projects(session: Session, *criteria) -> int:
    statement = select(func.count(Project.id))
    if criteria:
        statement = statement.where(*criteria)
    return session.exec(statement).one()


def project_stats(session: Session, now: datetime) -> ProjectStats:
    total = _count_projects(session)

    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    new_this_month = _count_projects(session, col(Project.created_at) >= month_start)

    # Unknown statuses still count toward the total but get no bucket
    status_counts = {status: 0 for status in KNOWN_STATUSES}
    rows = session.exec(
        select(Project.status, func.count(Project.id)).group_by(Project.status)
    ).all()
    for status, count in rows:
        if status in status_counts:
            status_counts[status] = count

    cutoff = now - FOLLOWUP_WINDOW
    pending_followups = _count_projects(
        session,
        Project.status == ProjectStatus.active.value,
        or_(col(Project.last_contacted).is_(None), col(Project.last_contacted) < cutoff),
    )

    recent = session.exec(
        select(Project)
        .order_by(col(Project.updated_at).desc(), col(Project.id).desc())
        .limit(RECENT_ACTIVITY_LIMIT)
    ).all()
    activities = [
        RecentActivity(
            description=f'Project "{p.name}" was updated to {p.status}',
            timestamp=p.updated_at.strftime(ACTIVITY_TIMESTAMP_FORMAT),
        )
        for p in recent
    ]

    return ProjectStats(
        total_projects=total,
        new_projects_this_month=new_this_month,
        status_counts=status_counts,
        completion_rate=completion_rate(status_counts[ProjectStatus.completed.value], total),
        pending_followups=pending_followups,
        recent_activities=activities,
    )


def client_stats(session: Session) -> ClientStats:
    total = session.exec(select(func.count(Client.id))).one()
    active = session.exec(
        select(func.count(Client.id)).where(Client.status == ProjectStatus.active.value)
    ).one()
    return ClientStats(total_clients=total, active_clients=active)
