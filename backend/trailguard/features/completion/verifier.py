"""
Completion Verifier

Decides whether a finished recording qualifies as a completed trail
and estimates its token reward. Pure: never raises, never issues tokens.

Policy (defaults):
- distance   >= 500 m
- duration   >= 5 min
- fix count  >= 10

completion_percentage = min(100, 100 * worst ratio)
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from trailguard.features.profiles import UserFitnessProfile
from trailguard.features.recording.models import FinishedRecording
from trailguard.features.safety.difficulty import personalize_difficulty
from trailguard.shared.constants import TrailDifficulty

logger = logging.getLogger(__name__)


# Reason prefixes, in evaluation order
REASON_NO_RECORDING = "no finished recording"
REASON_DISTANCE = "distance below minimum"
REASON_DURATION = "duration below minimum"
REASON_FIX_COUNT = "point count below minimum"

# Reward curve
BASE_REWARD_TOKENS = 10
TOKENS_PER_KM = 10.0

DIFFICULTY_MULTIPLIERS: dict[TrailDifficulty, float] = {
    TrailDifficulty.EASY: 1.0,
    TrailDifficulty.MODERATE: 1.25,
    TrailDifficulty.HARD: 1.5,
    TrailDifficulty.EXPERT: 2.0,
}


@dataclass(frozen=True)
class CompletionPolicy:
    """Minimum thresholds for a reward-eligible recording."""
    min_distance_m: float = 500.0
    min_duration_s: float = 300.0
    min_fix_count: int = 10

    @classmethod
    def from_settings(cls, settings) -> "CompletionPolicy":
        return cls(
            min_distance_m=settings.min_distance_m,
            min_duration_s=settings.min_duration_s,
            min_fix_count=settings.min_fix_count,
        )


@dataclass(frozen=True)
class CompletionResult:
    """Verdict for one finished recording. Re-verification builds a new one."""
    completed: bool
    completion_percentage: float
    distance_m: float
    duration_s: float
    fix_count: int
    token_reward: int
    nft_eligible: bool
    difficulty: TrailDifficulty = TrailDifficulty.MODERATE
    reasons: tuple[str, ...] = ()


class RewardSink(Protocol):
    """Ledger collaborator; receives completed recordings only."""

    def submit(self, recording: FinishedRecording, result: CompletionResult) -> None:
        ...


def _ratio(value: float, minimum: float) -> float:
    if minimum <= 0:
        return 1.0
    return max(0.0, value / minimum)


def estimate_reward(distance_m: float, difficulty: TrailDifficulty) -> int:
    """
    Estimate TREK token reward.

    Monotonically increasing in distance; scaled by difficulty.

    Args:
        distance_m: Recorded distance in meters
        difficulty: Effective difficulty for the hiker

    Returns:
        Whole number of tokens
    """
    base = BASE_REWARD_TOKENS + max(0.0, distance_m) / 1000 * TOKENS_PER_KM
    return int(base * DIFFICULTY_MULTIPLIERS[difficulty])


def verify_completion(
    recording: Optional[FinishedRecording],
    policy: Optional[CompletionPolicy] = None,
    difficulty: TrailDifficulty = TrailDifficulty.MODERATE,
    profile: Optional[UserFitnessProfile] = None,
) -> CompletionResult:
    """
    Evaluate a finished recording against the completion policy.

    Args:
        recording: Stopped recording, or None if there is none
        policy: Thresholds (defaults when None)
        difficulty: Nominal trail difficulty
        profile: Optional fitness profile; personalizes the reward multiplier

    Returns:
        CompletionResult (reasons ordered distance, duration, point count)
    """
    policy = policy or CompletionPolicy()

    if recording is None:
        return CompletionResult(
            completed=False,
            completion_percentage=0.0,
            distance_m=0.0,
            duration_s=0.0,
            fix_count=0,
            token_reward=0,
            nft_eligible=False,
            difficulty=difficulty,
            reasons=(REASON_NO_RECORDING,),
        )

    distance_m = recording.distance_m
    duration_s = recording.duration_s
    fix_count = recording.fix_count

    reasons = []
    if distance_m < policy.min_distance_m:
        reasons.append(
            f"{REASON_DISTANCE}: {distance_m:.0f} m of {policy.min_distance_m:.0f} m"
        )
    if duration_s < policy.min_duration_s:
        reasons.append(
            f"{REASON_DURATION}: {duration_s:.0f} s of {policy.min_duration_s:.0f} s"
        )
    if fix_count < policy.min_fix_count:
        reasons.append(
            f"{REASON_FIX_COUNT}: {fix_count} of {policy.min_fix_count}"
        )

    completed = not reasons
    worst = min(
        _ratio(distance_m, policy.min_distance_m),
        _ratio(duration_s, policy.min_duration_s),
        _ratio(fix_count, policy.min_fix_count),
    )
    percentage = min(100.0, 100.0 * worst)

    effective = difficulty
    if profile is not None:
        effective = personalize_difficulty(difficulty, profile).personalized

    reward = estimate_reward(distance_m, effective) if completed else 0

    logger.info(
        f"Verified recording {recording.id}: completed={completed} "
        f"({percentage:.1f}%), reward={reward}"
    )

    return CompletionResult(
        completed=completed,
        completion_percentage=percentage,
        distance_m=distance_m,
        duration_s=duration_s,
        fix_count=fix_count,
        token_reward=reward,
        nft_eligible=completed,
        difficulty=effective,
        reasons=tuple(reasons),
    )
