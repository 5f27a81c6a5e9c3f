"""Canonical coin lookups for litigation stages and substages."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from types import MappingProxyType

from verdict_path.litigation.taxonomy import LITIGATION_STAGES
from verdict_path.metrics import UNKNOWN_REWARD_LOOKUPS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubstageInfo:
    """A substage tagged with the stage it belongs to."""

    id: str
    name: str
    type: str
    coins: int
    stage_id: int
    stage_name: str


@dataclass(frozen=True)
class StageInfo:
    id: int
    name: str
    coins: int
    substages: tuple[SubstageInfo, ...] = field(default_factory=tuple)


class RewardTable:
    """Immutable stage/substage → coins mapping.

    Built once at startup and handed to the services that need lookups.
    Unknown ids are worth 0 coins: the lookup logs a warning and bumps a
    counter instead of raising, since callers may pass ids from a client
    whose taxonomy is stale.
    """

    def __init__(self, stages: Iterable[StageInfo]) -> None:
        stage_map: dict[int, StageInfo] = {}
        substage_map: dict[str, SubstageInfo] = {}
        for stage in stages:
            if stage.id in stage_map:
                msg = f"Duplicate stage id {stage.id}"
                raise ValueError(msg)
            stage_map[stage.id] = stage
            for sub in stage.substages:
                if sub.id in substage_map:
                    msg = f"Substage {sub.id} claimed by stages {substage_map[sub.id].stage_id} and {stage.id}"
                    raise ValueError(msg)
                if sub.stage_id != stage.id:
                    msg = f"Substage {sub.id} is tagged with stage {sub.stage_id} but listed under {stage.id}"
                    raise ValueError(msg)
                substage_map[sub.id] = sub

        self._stages = MappingProxyType(dict(sorted(stage_map.items())))
        self._substages = MappingProxyType(substage_map)

    @property
    def stages(self) -> tuple[StageInfo, ...]:
        """Stages in id order."""
        return tuple(self._stages.values())

    @property
    def total_substages(self) -> int:
        return len(self._substages)

    def __iter__(self) -> Iterator[StageInfo]:
        return iter(self._stages.values())

    def __contains__(self, substage_id: object) -> bool:
        return substage_id in self._substages

    def get_stage(self, stage_id: int) -> StageInfo | None:
        return self._stages.get(stage_id)

    def get_substage(self, substage_id: str) -> SubstageInfo | None:
        return self._substages.get(substage_id)

    def get_stage_coins(self, stage_id: int) -> int:
        """Canonical coins for a stage; 0 for an unknown id."""
        stage = self._stages.get(stage_id)
        if stage is None:
            logger.warning("Unknown stage id %r in reward lookup", stage_id)
            UNKNOWN_REWARD_LOOKUPS.labels(kind="stage").inc()
            return 0
        return stage.coins

    def get_substage_coins(self, substage_id: str) -> int:
        """Canonical coins for a substage; 0 for an unknown id."""
        sub = self._substages.get(substage_id)
        if sub is None:
            logger.warning("Unknown substage id %r in reward lookup", substage_id)
            UNKNOWN_REWARD_LOOKUPS.labels(kind="substage").inc()
            return 0
        return sub.coins


def build_reward_table(stages: list[dict] | None = None) -> RewardTable:
    """Build a RewardTable from taxonomy dicts (defaults to the reference taxonomy)."""
    if stages is None:
        stages = LITIGATION_STAGES
    return RewardTable(
        StageInfo(
            id=stage["id"],
            name=stage["name"],
            coins=stage["coins"],
            substages=tuple(
                SubstageInfo(
                    id=sub["id"],
                    name=sub["name"],
                    type=sub.get("type", "upload"),
                    coins=sub["coins"],
                    stage_id=stage["id"],
                    stage_name=stage["name"],
                )
                for sub in stage["substages"]
            ),
        )
        for stage in stages
    )
