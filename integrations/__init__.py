"""
FloodGuard external collaborators: Gemini photo triage, the warning siren
and third-party navigation links.
"""

from .gemini_classifier import GeminiFloodClassifier, fallback_analysis
from .siren import Siren
from .navigation import build_directions_url, plan_navigation

__all__ = [
    "GeminiFloodClassifier",
    "fallback_analysis",
    "Siren",
    "build_directions_url",
    "plan_navigation",
]
