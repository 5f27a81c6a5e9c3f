"""Litigation progress: percent complete, litigation coins and current stage."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import String, cast, literal_column, select, union_all
from sqlalchemy.ext.asyncio import AsyncSession

from verdict_path.database import read_only
from verdict_path.db.models import StageCompletion, SubstageCompletion
from verdict_path.litigation.reward_table import RewardTable, StageInfo
from verdict_path.users.service import require_user


@dataclass(frozen=True)
class Progress:
    completed_substage_ids: frozenset[str]
    completed_stage_ids: frozenset[int]
    percent_complete: float
    coins_from_litigation: int
    current_stage_id: int
    current_stage_name: str
    total_substages: int


def compute_current_stage(table: RewardTable, completed: Iterable[str]) -> StageInfo:
    """The stage the user is working in.

    A partially done stage is current. A fully done stage hands over to the
    next one. Once every stage before the last is done, the last is current.
    """
    done = set(completed)
    stages = table.stages
    current = stages[0]

    for index, stage in enumerate(stages):
        finished = sum(1 for sub in stage.substages if sub.id in done)
        if finished == len(stage.substages) and index < len(stages) - 1:
            current = stages[index + 1]
        elif finished > 0:
            current = stage
            break

    if all(sub.id in done for stage in stages[:-1] for sub in stage.substages):
        current = stages[-1]
    return current


def percent_complete(table: RewardTable, completed: Iterable[str]) -> float:
    if table.total_substages == 0:
        return 0.0
    known = sum(1 for substage_id in set(completed) if substage_id in table)
    return round(100 * known / table.total_substages, 2)


async def get_progress(db: AsyncSession, table: RewardTable, user_id: int) -> Progress:
    """Aggregate a user's litigation progress.

    Substage and stage rows are read in one UNION ALL statement so the
    percentage and the coin total always describe the same snapshot.
    """
    substage_rows = select(
        literal_column("'substage'").label("kind"),
        SubstageCompletion.substage_id.label("ref"),
        SubstageCompletion.coins_awarded.label("coins"),
    ).where(SubstageCompletion.user_id == user_id)
    stage_rows = select(
        literal_column("'stage'").label("kind"),
        cast(StageCompletion.stage_id, String).label("ref"),
        StageCompletion.coins_awarded.label("coins"),
    ).where(StageCompletion.user_id == user_id)

    async with read_only(db):
        await require_user(db, user_id)
        result = await db.execute(union_all(substage_rows, stage_rows))
        rows = result.all()

    substage_ids: set[str] = set()
    stage_ids: set[int] = set()
    coins = 0
    for kind, ref, awarded in rows:
        coins += awarded
        if kind == "substage":
            substage_ids.add(ref)
        else:
            stage_ids.add(int(ref))

    current = compute_current_stage(table, substage_ids)
    return Progress(
        completed_substage_ids=frozenset(substage_ids),
        completed_stage_ids=frozenset(stage_ids),
        percent_complete=percent_complete(table, substage_ids),
        coins_from_litigation=coins,
        current_stage_id=current.id,
        current_stage_name=current.name,
        total_substages=table.total_substages,
    )
