"""Services for GuestPulse."""

from .llm import LLMServiceFactory
from .pipeline import ReviewAnalysisPipeline

__all__ = [
    "LLMServiceFactory",
    "ReviewAnalysisPipeline",
]
