"""Prometheus counters for the rewards core."""

from prometheus_client import Counter

UNKNOWN_REWARD_LOOKUPS = Counter(
    "verdict_path_unknown_reward_lookups_total",
    "Reward lookups for stage/substage ids missing from the taxonomy",
    ["kind"],  # stage, substage
)

COINS_AWARDED = Counter(
    "verdict_path_coins_awarded_total",
    "Coins credited to user balances",
    ["reason"],
)

DAILY_CLAIMS = Counter(
    "verdict_path_daily_claims_total",
    "Daily bonus claim attempts",
    ["outcome"],  # claimed, already_claimed
)
