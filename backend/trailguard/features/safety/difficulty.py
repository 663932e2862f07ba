"""
Personalized Difficulty

Adjusts a trail's nominal difficulty to a specific hiker.

Adjustment score (positive = trail feels easier):
- Fitness:    (fitness_level - 50) / 25        -> -2 .. +2
- Experience: beginner -1, intermediate 0, advanced 0.5, expert 1
- History:    min(completed_trails / 20, 0.5)

The difficulty index moves down by score rounded half up, clamped to Easy..Expert.
"""

import math
from dataclasses import dataclass, field
from typing import List

from trailguard.features.profiles import UserFitnessProfile
from trailguard.shared.constants import DIFFICULTY_SCALE, ExperienceLevel, TrailDifficulty


EXPERIENCE_ADJUSTMENT: dict[ExperienceLevel, float] = {
    ExperienceLevel.BEGINNER: -1.0,
    ExperienceLevel.INTERMEDIATE: 0.0,
    ExperienceLevel.ADVANCED: 0.5,
    ExperienceLevel.EXPERT: 1.0,
}

MAX_HISTORY_ADJUSTMENT = 0.5
TRAILS_PER_HISTORY_STEP = 20


@dataclass
class AdjustmentFactor:
    factor: str
    impact: float
    description: str


@dataclass
class PersonalizedDifficulty:
    """Result of a personalized difficulty assessment."""
    original: TrailDifficulty
    personalized: TrailDifficulty
    fitness_score: int
    experience_level: ExperienceLevel
    factors: List[AdjustmentFactor] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def adjustment_score(self) -> float:
        return sum(f.impact for f in self.factors)


def adjust_difficulty(original: TrailDifficulty, adjustment: float) -> TrailDifficulty:
    """Shift difficulty by the rounded adjustment (positive = easier)."""
    index = DIFFICULTY_SCALE.index(original)
    new_index = max(0, min(len(DIFFICULTY_SCALE) - 1, index - math.floor(adjustment + 0.5)))
    return DIFFICULTY_SCALE[new_index]


def personalize_difficulty(
    difficulty: TrailDifficulty,
    profile: UserFitnessProfile
) -> PersonalizedDifficulty:
    """
    Assess how hard a trail is for this hiker.

    Args:
        difficulty: Nominal trail difficulty
        profile: Hiker's fitness profile

    Returns:
        PersonalizedDifficulty with factors and recommendations
    """
    fitness = (profile.fitness_level - 50) / 25
    experience = EXPERIENCE_ADJUSTMENT[profile.experience_level]
    history = min(profile.completed_trails / TRAILS_PER_HISTORY_STEP, MAX_HISTORY_ADJUSTMENT)

    factors = [
        AdjustmentFactor(
            factor="Fitness Level",
            impact=fitness,
            description=(
                f"Your fitness level ({profile.fitness_level}/100) "
                f"{'reduces' if fitness > 0 else 'increases'} difficulty"
            ),
        ),
        AdjustmentFactor(
            factor="Experience Level",
            impact=experience,
            description=(
                f"{profile.experience_level.value} level "
                f"{'reduces' if experience > 0 else 'increases'} difficulty"
            ),
        ),
        AdjustmentFactor(
            factor="Trail Experience",
            impact=history,
            description=f"{profile.completed_trails} completed trails reduce difficulty",
        ),
    ]

    personalized = adjust_difficulty(difficulty, fitness + experience + history)

    return PersonalizedDifficulty(
        original=difficulty,
        personalized=personalized,
        fitness_score=profile.fitness_level,
        experience_level=profile.experience_level,
        factors=factors,
        recommendations=_recommendations(personalized, factors),
    )


def _recommendations(difficulty: TrailDifficulty, factors: List[AdjustmentFactor]) -> List[str]:
    recommendations = []

    if difficulty == TrailDifficulty.EXPERT:
        recommendations.append(
            "This trail is very challenging for you - consider building up experience first"
        )
    elif difficulty == TrailDifficulty.EASY:
        recommendations.append("This trail should be comfortable for your fitness level")

    if any(f.factor == "Fitness Level" and f.impact < -1 for f in factors):
        recommendations.append("Take frequent breaks and keep a steady pace")

    return recommendations
