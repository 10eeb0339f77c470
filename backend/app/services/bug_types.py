from typing import List, Optional

from app.core.errors import InvalidBugTypeError
from app.models.project import Project

DEFAULT_BUG_TYPES = (
    "Functional",
    "Visual",
    "Performance",
    "Security",
    "Usability",
    "Compatibility",
)


def allowed_bug_types(project: Project) -> List[str]:
    """
    Names of the bug types a project accepts.

    Projects without custom types accept the default set.
    """
    custom = [bug_type["name"] for bug_type in project.bug_types or [] if bug_type.get("name")]
    return custom or list(DEFAULT_BUG_TYPES)


def validate_bug_type(bug_type: Optional[str], project: Optional[Project]) -> None:
    """
    Check an explicitly supplied bug type against the project's taxonomy.

    Raises:
        InvalidBugTypeError: if the type is not accepted by the project
    """
    if not bug_type or project is None:
        return
    allowed = allowed_bug_types(project)
    if bug_type not in allowed:
        raise InvalidBugTypeError(allowed)
