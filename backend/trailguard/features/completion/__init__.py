"""
Trail completion module.

Usage:
    from trailguard.features.completion import verify_completion, CompletionPolicy

Available components:
- CompletionPolicy: minimum distance / duration / point count
- CompletionResult: frozen verdict with reasons and reward estimate
- verify_completion: pure policy evaluation
- estimate_reward: token reward curve
- RewardSink: protocol for the ledger collaborator
"""
from .verifier import (
    CompletionPolicy,
    CompletionResult,
    RewardSink,
    verify_completion,
    estimate_reward,
    DIFFICULTY_MULTIPLIERS,
    REASON_NO_RECORDING,
    REASON_DISTANCE,
    REASON_DURATION,
    REASON_FIX_COUNT,
)

__all__ = [
    "CompletionPolicy",
    "CompletionResult",
    "RewardSink",
    "verify_completion",
    "estimate_reward",
    "DIFFICULTY_MULTIPLIERS",
    "REASON_NO_RECORDING",
    "REASON_DISTANCE",
    "REASON_DURATION",
    "REASON_FIX_COUNT",
]
