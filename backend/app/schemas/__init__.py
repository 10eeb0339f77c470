from app.schemas.token import AuthResponse, TokenPayload
from app.schemas.user import (
    PasswordChange,
    User,
    UserCreate,
    UserLogin,
    UserResponse,
    UserSummary,
    UserUpdate,
)
from app.schemas.project import (
    BugType,
    Project,
    ProjectCreate,
    ProjectDetail,
    ProjectRef,
    ProjectSummary,
    ProjectUpdate,
    ProjectWithCounts,
)
from app.schemas.bug import (
    Bug,
    BugCreate,
    BugDeleted,
    BugEnvironment,
    BugStats,
    BugUpdate,
    ProjectBugs,
)
