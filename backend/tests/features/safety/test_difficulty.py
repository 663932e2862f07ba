"""
Tests for personalized trail difficulty.
"""

import pytest

from trailguard.features.profiles import UserFitnessProfile
from trailguard.features.safety import adjust_difficulty, personalize_difficulty
from trailguard.shared.constants import ExperienceLevel, TrailDifficulty


def profile(**kwargs) -> UserFitnessProfile:
    return UserFitnessProfile(id="u1", **kwargs)


class TestAdjustDifficulty:

    @pytest.mark.parametrize("original,adjustment,expected", [
        (TrailDifficulty.MODERATE, 0.0, TrailDifficulty.MODERATE),
        (TrailDifficulty.MODERATE, 1.0, TrailDifficulty.EASY),
        (TrailDifficulty.MODERATE, -1.0, TrailDifficulty.HARD),
        (TrailDifficulty.MODERATE, 0.5, TrailDifficulty.EASY),
        (TrailDifficulty.MODERATE, 0.49, TrailDifficulty.MODERATE),
        (TrailDifficulty.MODERATE, -0.5, TrailDifficulty.MODERATE),
        (TrailDifficulty.HARD, 2.5, TrailDifficulty.EASY),
    ])
    def test_rounds_half_up(self, original, adjustment, expected):
        assert adjust_difficulty(original, adjustment) == expected

    def test_clamped(self):
        assert adjust_difficulty(TrailDifficulty.EASY, 3.0) == TrailDifficulty.EASY
        assert adjust_difficulty(TrailDifficulty.EXPERT, -3.0) == TrailDifficulty.EXPERT


class TestPersonalizeDifficulty:

    def test_average_hiker_unchanged(self):
        result = personalize_difficulty(TrailDifficulty.HARD, profile())
        assert result.personalized == TrailDifficulty.HARD
        assert result.adjustment_score == 0.0
        assert [f.factor for f in result.factors] == [
            "Fitness Level", "Experience Level", "Trail Experience",
        ]

    def test_beginner_finds_it_harder(self):
        result = personalize_difficulty(
            TrailDifficulty.MODERATE,
            profile(fitness_level=40, experience_level=ExperienceLevel.BEGINNER),
        )
        # -0.4 - 1.0 = -1.4 -> one step harder
        assert result.personalized == TrailDifficulty.HARD

    def test_history_capped(self):
        result = personalize_difficulty(TrailDifficulty.MODERATE, profile(completed_trails=500))
        history = result.factors[2]
        assert history.impact == 0.5
        assert result.personalized == TrailDifficulty.EASY

    def test_recommendations(self):
        weak = personalize_difficulty(
            TrailDifficulty.HARD,
            profile(fitness_level=0, experience_level=ExperienceLevel.BEGINNER),
        )
        assert weak.personalized == TrailDifficulty.EXPERT
        assert any("challenging" in r for r in weak.recommendations)
        assert any("breaks" in r for r in weak.recommendations)

        strong = personalize_difficulty(
            TrailDifficulty.MODERATE,
            profile(fitness_level=90, experience_level=ExperienceLevel.ADVANCED),
        )
        assert strong.personalized == TrailDifficulty.EASY
        assert any("comfortable" in r for r in strong.recommendations)
