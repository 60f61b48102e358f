"""Aggregate statistics over users and workload entries."""

import logging
from collections import defaultdict
from datetime import date

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from workload_api.models.enums import WorkStatus
from workload_api.models.user import User
from workload_api.models.workload import WorkloadEntry
from workload_api.schemas.user import RoleStats, UserResponse, UserStatsResponse
from workload_api.schemas.workload import DeveloperWorkload, ProjectSummary, TaskTypeBreakdown

logger = logging.getLogger(__name__)


def _count_where(condition):
    """SUM(CASE WHEN condition THEN 1 ELSE 0 END)."""
    return func.sum(case((condition, 1), else_=0))


class StatisticsService:
    """Service for the dashboard aggregation queries."""

    def __init__(self, db: Session):
        self.db = db

    def user_stats(self) -> UserStatsResponse:
        """Count users per role, split into active and inactive."""
        rows = (
            self.db.query(
                User.role,
                func.count(User.id),
                _count_where(User.is_active.is_(True)),
            )
            .group_by(User.role)
            .all()
        )

        distribution = [
            RoleStats(
                role=role,
                count=count,
                active_users=int(active or 0),
                inactive_users=count - int(active or 0),
            )
            for role, count, active in rows
        ]
        distribution.sort(key=lambda stats: stats.role.value)

        total = sum(stats.count for stats in distribution)
        active = sum(stats.active_users for stats in distribution)
        return UserStatsResponse(
            total_users=total,
            active_users=active,
            inactive_users=total - active,
            role_distribution=distribution,
        )

    def workload_stats(
        self,
        start_date: date,
        end_date: date,
        developer_id: int | None = None,
    ) -> list[DeveloperWorkload]:
        """Hours and entry counts per developer, broken down by task type.

        Entries are grouped by (developer, task type) in the database, then
        regrouped per developer here. Developers whose user record no longer
        exists are left out.
        """
        query = self.db.query(
            WorkloadEntry.developer_id,
            WorkloadEntry.task_type,
            func.sum(WorkloadEntry.hours_spent),
            func.count(WorkloadEntry.id),
        ).filter(WorkloadEntry.date >= start_date, WorkloadEntry.date <= end_date)
        if developer_id is not None:
            query = query.filter(WorkloadEntry.developer_id == developer_id)
        rows = query.group_by(WorkloadEntry.developer_id, WorkloadEntry.task_type).all()

        by_developer: dict[int, list[TaskTypeBreakdown]] = defaultdict(list)
        for dev_id, task_type, total_hours, task_count in rows:
            by_developer[dev_id].append(
                TaskTypeBreakdown(
                    task_type=task_type,
                    total_hours=float(total_hours or 0),
                    task_count=task_count,
                )
            )

        if not by_developer:
            return []

        users = self.db.query(User).filter(User.id.in_(list(by_developer))).all()
        users_by_id = {user.id: user for user in users}

        results = []
        for dev_id, breakdown in by_developer.items():
            user = users_by_id.get(dev_id)
            if user is None:
                logger.warning(f"Skipping workload stats for missing user {dev_id}")
                continue
            breakdown.sort(key=lambda item: item.total_hours, reverse=True)
            results.append(
                DeveloperWorkload(
                    developer=UserResponse.model_validate(user),
                    workload_by_type=breakdown,
                    total_hours=sum(item.total_hours for item in breakdown),
                )
            )

        results.sort(key=lambda item: item.total_hours, reverse=True)
        return results

    def project_summary(self, start_date: date, end_date: date) -> list[ProjectSummary]:
        """Totals and completion rate per project, largest projects first."""
        total_hours = func.sum(WorkloadEntry.hours_spent)
        rows = (
            self.db.query(
                WorkloadEntry.project,
                total_hours,
                func.count(WorkloadEntry.id),
                _count_where(WorkloadEntry.status == WorkStatus.COMPLETED),
                _count_where(WorkloadEntry.status == WorkStatus.BLOCKED),
            )
            .filter(WorkloadEntry.date >= start_date, WorkloadEntry.date <= end_date)
            .group_by(WorkloadEntry.project)
            .order_by(total_hours.desc(), WorkloadEntry.project)
            .all()
        )

        # A group only exists with at least one entry, so task_count >= 1
        return [
            ProjectSummary(
                project=project,
                total_hours=float(hours or 0),
                task_count=task_count,
                completed_tasks=int(completed or 0),
                blocked_tasks=int(blocked or 0),
                completion_rate=int(completed or 0) / task_count * 100,
            )
            for project, hours, task_count, completed, blocked in rows
        ]
