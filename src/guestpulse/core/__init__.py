"""Core modules for GuestPulse."""

from .models import *
from .config import settings
from .errors import *
from .aggregation import *

__all__ = [
    "settings",
    "Review",
    "ParsedRecord",
    "Sentiment",
    "Topic",
    "DashboardState",
    "TopicAnalysis",
    "TopicInsight",
    "TopicSuggestionGroup",
    "TrendPoint",
    "GuestPulseError",
    "InvalidFileError",
    "ClassificationError",
    "AnalysisError",
    "UnknownError",
]
