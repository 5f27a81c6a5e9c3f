"""Pydantic request/response models for coin endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class DailyClaimResponse(BaseModel):
    claimed: bool
    streak: int
    coins_awarded: int
    total_coins: int


class BalanceResponse(BaseModel):
    total_coins: int
    coins_spent: int
    available_coins: int
    lifetime_credits: int
    max_lifetime_credits: int
    remaining_lifetime_credits: int


class ConvertRequest(BaseModel):
    coins: int = Field(gt=0)


class ConvertResponse(BaseModel):
    coins_converted: int
    credit_amount: int
    balance: BalanceResponse


class ConversionEntry(BaseModel):
    id: int
    coins_converted: int
    credit_amount: int
    conversion_rate: int
    converted_at: datetime

    model_config = {"from_attributes": True}


class ConversionHistoryResponse(BaseModel):
    conversions: list[ConversionEntry]
