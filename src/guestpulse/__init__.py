"""GuestPulse - AI-powered guest feedback analytics."""

__version__ = "1.0.0"
__author__ = "GuestPulse Team"

from .core.models import *
from .core.config import settings
from .services.llm import LLMServiceFactory
from .services.pipeline import ReviewAnalysisPipeline

__all__ = [
    "settings",
    "LLMServiceFactory",
    "ReviewAnalysisPipeline",
]
