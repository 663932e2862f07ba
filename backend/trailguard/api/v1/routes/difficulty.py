"""
Difficulty Routes

Personalized trail difficulty for a fitness profile.
"""

from fastapi import APIRouter

from trailguard.features.safety import personalize_difficulty
from trailguard.features.safety.schemas import DifficultyRequest, DifficultyResponse

router = APIRouter()


@router.post("/personalized", response_model=DifficultyResponse)
async def personalized_difficulty(request: DifficultyRequest):
    """Adjust nominal difficulty by fitness, experience and trail history."""
    assessment = personalize_difficulty(request.difficulty, request.profile)
    return DifficultyResponse.model_validate(assessment)
