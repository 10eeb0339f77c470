from app.models.base import Base
from app.models.user import User
from app.models.project import Project, project_member
from app.models.bug import Bug
