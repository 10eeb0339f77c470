"""
Human readable bug numbers.

Bugs inside a project are numbered ``{KEY}-{seq:03d}`` from a per-project
counter. The counter is bumped with a single ``UPDATE ... RETURNING`` so the
row lock serializes concurrent creators until the surrounding transaction
commits. Bugs without a (known) project get ``BUG-{epoch ms}``.
"""
import time
from typing import Optional, Tuple
from uuid import UUID

from loguru import logger
from sqlalchemy import exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.bug import Bug
from app.models.project import Project

log = logger.bind(component="numbering")

FALLBACK_PREFIX = "BUG"


def format_bug_number(project_key: str, sequence: int) -> str:
    return f"{project_key}-{sequence:03d}"


async def _bug_number_taken(db: AsyncSession, bug_number: str) -> bool:
    result = await db.execute(select(exists().where(Bug.bug_number == bug_number)))
    return bool(result.scalar())


def _now_ms() -> int:
    return int(time.time() * 1000)


async def fallback_bug_number(db: AsyncSession, after: Optional[str] = None) -> str:
    """
    Pick a free ``BUG-{epoch ms}`` number, later than ``after`` when given.

    The check is not atomic with the insert; callers retry on a unique
    violation of ``bug_number``.
    """
    timestamp = _now_ms()
    if after is not None:
        timestamp = max(timestamp, int(after.rsplit("-", 1)[1]) + 1)
    candidate = f"{FALLBACK_PREFIX}-{timestamp}"
    while await _bug_number_taken(db, candidate):
        timestamp += 1
        candidate = f"{FALLBACK_PREFIX}-{timestamp}"
    return candidate


async def next_bug_number(
    db: AsyncSession, project_id: Optional[UUID]
) -> Tuple[str, Optional[Project]]:
    """
    Reserve the next bug number for a bug about to be inserted.

    Must run in the same transaction as the insert of the bug.

    Returns:
        The bug number and the referenced project, or ``None`` when no
        project was given or it does not exist.
    """
    if project_id is None:
        return await fallback_bug_number(db), None

    result = await db.execute(
        update(Project)
        .where(Project.id == project_id)
        .values(bug_sequence=Project.bug_sequence + 1)
        .returning(Project.key, Project.bug_sequence)
        .execution_options(synchronize_session=False)
    )
    row = result.first()
    if row is None:
        log.warning(f"Project {project_id} not found, using fallback bug number")
        return await fallback_bug_number(db), None

    project_key, sequence = row
    project = await db.get(Project, project_id)
    return format_bug_number(project_key, sequence), project
