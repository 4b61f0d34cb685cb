"""Import all models so SQLModel.metadata picks them up."""

from gateway.models.api_log import ApiLog
from gateway.models.api_token import ApiToken, TokenScopes
from gateway.models.organization import Direction, OrgUnitName, Pole, Service
from gateway.models.project import (
    Project,
    ProjectDetailRead,
    ProjectStatistics,
    ProjectSummaryRead,
    Review,
    ReviewSnapshotRead,
)
from gateway.models.risk import Risk, RiskRead
from gateway.models.task import Task, TaskRead
from gateway.models.team import Profile, ProjectMember, TeamMemberRead

__all__ = [
    "ApiLog",
    "ApiToken",
    "Direction",
    "OrgUnitName",
    "Pole",
    "Profile",
    "Project",
    "ProjectDetailRead",
    "ProjectMember",
    "ProjectStatistics",
    "ProjectSummaryRead",
    "Review",
    "ReviewSnapshotRead",
    "Risk",
    "RiskRead",
    "Service",
    "Task",
    "TaskRead",
    "TeamMemberRead",
    "TokenScopes",
]
