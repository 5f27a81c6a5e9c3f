"""Pydantic response models for litigation endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class CompletionResponse(BaseModel):
    already_completed: bool
    coins_awarded: int
    total_coins: int


class ProgressResponse(BaseModel):
    completed_substage_ids: list[str]
    completed_stage_ids: list[int]
    percent_complete: float
    coins_from_litigation: int
    current_stage_id: int
    current_stage_name: str
    total_substages: int


# --- Taxonomy ---


class SubstageEntry(BaseModel):
    id: str
    name: str
    type: str
    coins: int


class StageEntry(BaseModel):
    id: int
    name: str
    coins: int
    substages: list[SubstageEntry]


class TaxonomyResponse(BaseModel):
    stages: list[StageEntry]
    total_substages: int
