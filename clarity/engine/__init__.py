"""Recommendation engine: explanation, negotiation and session flow."""

from .explanation import ExplanationGenerator, find_goal
from .negotiator import InvalidTransitionError, NegotiationState, TimeWindowNegotiator
from .recommender import Recommender
from .session import RecommendationSession

__all__ = [
    'ExplanationGenerator',
    'InvalidTransitionError',
    'NegotiationState',
    'RecommendationSession',
    'Recommender',
    'TimeWindowNegotiator',
    'find_goal',
]
