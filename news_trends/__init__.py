"""News Trends package initializer."""

from .config import MissingCredentialsError, TrendConfig
from .models import DetailLevel, PipelineOptions, TrendReport, TrendRequest
from .pipeline import TrendPipeline

__all__ = [
    "DetailLevel",
    "MissingCredentialsError",
    "PipelineOptions",
    "TrendConfig",
    "TrendPipeline",
    "TrendReport",
    "TrendRequest",
]
