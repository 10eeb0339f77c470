"""
Project access rules.

A user can read a project (and its bugs) when they created it or belong to
its team. Only the creator may change or delete the project itself.
"""
from app.models.project import Project
from app.models.user import User


def is_owner(user: User, project: Project) -> bool:
    return user.id == project.creator_id


def has_access(user: User, project: Project) -> bool:
    return is_owner(user, project) or user.id in project.team_member_ids
