"""
Reward tier progression.

Maps an accumulated point total onto the static tier table, computes progress
toward the next rung and detects tier crossings when points are earned.
"""

import random
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .events import NotificationSink, StateStore
from .logger import StructuredLogger, get_logger
from .models import Notification
from .services import RandomSource


@dataclass(frozen=True)
class RewardTier:
    id: int
    name: str
    required_points: int
    benefits: Tuple[str, ...] = ()
    emoji: str = ""


# Descending by threshold; the sentinel is kept apart
TIERS: Tuple[RewardTier, ...] = (
    RewardTier(
        id=3,
        name="Diamond",
        emoji="💎",
        required_points=1000,
        benefits=(
            "Exclusive job offers",
            "VIP support 24/7",
            "Priority job application",
            "Custom job alerts",
            "Direct messaging with employers",
        ),
    ),
    RewardTier(
        id=2,
        name="Gold",
        emoji="🥇",
        required_points=500,
        benefits=(
            "Early access to new jobs",
            "Priority notifications",
            "Profile boost",
            "Extended job history",
        ),
    ),
    RewardTier(
        id=1,
        name="Silver",
        emoji="🥈",
        required_points=100,
        benefits=(
            "Regular job postings",
            "Personalized recommendations",
            "Basic profile features",
        ),
    ),
)

DEFAULT_TIER = RewardTier(
    id=0,
    name="No Tier",
    emoji="❓",
    required_points=0,
    benefits=("Start applying to earn points!",),
)

POINTS_RANGE = (10, 50)


def validate_tier_table(
    tiers: Sequence[RewardTier] = TIERS,
    default: RewardTier = DEFAULT_TIER,
) -> None:
    """
    Check the ordering invariants of a tier table.

    Raises:
        ValueError: If thresholds do not strictly decrease, ordinals do not
            strictly decrease with them, or the sentinel is not below every tier
    """
    for higher, lower in zip(tiers, tiers[1:]):
        if higher.required_points <= lower.required_points:
            raise ValueError(
                f"Tier thresholds must strictly decrease: {higher.name} <= {lower.name}"
            )
        if higher.id <= lower.id:
            raise ValueError(
                f"Tier ordinals must increase with threshold: {higher.name} <= {lower.name}"
            )
    if default.required_points != 0:
        raise ValueError("Default tier threshold must be 0")
    if tiers and default.id >= tiers[-1].id:
        raise ValueError("Default tier ordinal must be below every real tier")


def _check_points(points: int) -> None:
    if points < 0:
        raise ValueError(f"Points must be non-negative, got {points}")


def tier_for(points: int, tiers: Sequence[RewardTier] = TIERS) -> RewardTier:
    _check_points(points)
    for tier in tiers:
        if tier.required_points <= points:
            return tier
    return DEFAULT_TIER


def next_tier(points: int, tiers: Sequence[RewardTier] = TIERS) -> Optional[RewardTier]:
    """The rung directly above ``points``; None once the top tier is reached."""
    _check_points(points)
    above = [t for t in tiers if t.required_points > points]
    if not above:
        return None
    return min(above, key=lambda t: t.required_points)


def progress(points: int, tiers: Sequence[RewardTier] = TIERS) -> float:
    upcoming = next_tier(points, tiers)
    if upcoming is None:
        return 1.0
    floor = tier_for(points, tiers).required_points
    span = upcoming.required_points - floor
    if span <= 0:
        return 1.0
    return min(max((points - floor) / span, 0.0), 1.0)


def points_to_next(points: int, tiers: Sequence[RewardTier] = TIERS) -> Optional[int]:
    upcoming = next_tier(points, tiers)
    if upcoming is None:
        return None
    return upcoming.required_points - points


@dataclass(frozen=True)
class RewardState:
    points: int
    previous_tier_id: int

    def __post_init__(self):
        _check_points(self.points)

    @classmethod
    def initial(cls, points: int = 450, tiers: Sequence[RewardTier] = TIERS) -> "RewardState":
        return cls(points=points, previous_tier_id=tier_for(points, tiers).id)


@dataclass(frozen=True)
class EarnResult:
    state: RewardState
    earned: int
    crossed_tier: bool


def earn_points(
    state: RewardState,
    rng: Optional[RandomSource] = None,
    points_range: Tuple[int, int] = POINTS_RANGE,
    tiers: Sequence[RewardTier] = TIERS,
) -> EarnResult:
    """
    Add a random amount of points and report whether a tier was crossed.

    Args:
        state: Current reward state
        rng: Random source for the amount (default: module ``random``)
        points_range: Inclusive (low, high) bounds of the draw
        tiers: Tier table

    Returns:
        EarnResult with the new state, the amount earned and the crossing flag
    """
    rng = rng or random
    low, high = points_range
    earned = rng.randint(low, high)
    points = state.points + earned
    new_tier = tier_for(points, tiers)
    crossed = new_tier.id > state.previous_tier_id
    return EarnResult(
        state=RewardState(points=points, previous_tier_id=new_tier.id),
        earned=earned,
        crossed_tier=crossed,
    )


class RewardTracker:
    """
    Session-scoped owner of a ``RewardState``.

    Publishes ``rewards.points`` / ``rewards.tier`` on the state store and
    notifies the sink when a new tier is reached.
    """

    def __init__(
        self,
        sink: NotificationSink,
        state: Optional[RewardState] = None,
        rng: Optional[RandomSource] = None,
        points_range: Tuple[int, int] = POINTS_RANGE,
        store: Optional[StateStore] = None,
        logger: Optional[StructuredLogger] = None,
        tiers: Sequence[RewardTier] = TIERS,
    ):
        validate_tier_table(tiers)
        self.sink = sink
        self.rng = rng
        self.points_range = points_range
        self.store = store
        self.tiers = tiers
        self.state = state or RewardState.initial(tiers=tiers)
        self.last_earned = 0
        self._logger = logger or get_logger()
        self._publish()

    @property
    def points(self) -> int:
        return self.state.points

    @property
    def current_tier(self) -> RewardTier:
        return tier_for(self.state.points, self.tiers)

    @property
    def next_tier(self) -> Optional[RewardTier]:
        return next_tier(self.state.points, self.tiers)

    @property
    def progress(self) -> float:
        return progress(self.state.points, self.tiers)

    @property
    def points_to_next(self) -> Optional[int]:
        return points_to_next(self.state.points, self.tiers)

    def earn(self) -> EarnResult:
        result = earn_points(self.state, self.rng, self.points_range, self.tiers)
        self.state = result.state
        self.last_earned = result.earned
        self._logger.info(
            "Points earned",
            earned=result.earned,
            points=result.state.points,
            tier=self.current_tier.name,
        )
        self._publish()
        if result.crossed_tier:
            tier = self.current_tier
            self._logger.record_tier_crossed()
            self.sink.notify(Notification(
                title="New Tier Achieved! 🎉",
                message=f"Congratulations! You've reached {tier.name} tier!",
            ))
        return result

    def _publish(self):
        if self.store is None:
            return
        self.store.set("rewards.points", self.state.points)
        self.store.set("rewards.tier", self.current_tier.name)
