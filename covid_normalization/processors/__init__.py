"""Chart data processors for normalization pipeline."""

from covid_normalization.processors.timeline import TimelineProcessor
from covid_normalization.processors.radar import RadarProcessor
from covid_normalization.processors.flow import FlowProcessor
from covid_normalization.processors.heatmap import HeatmapProcessor
from covid_normalization.processors.symptoms import SymptomTrendProcessor

__all__ = [
    "TimelineProcessor",
    "RadarProcessor",
    "FlowProcessor",
    "HeatmapProcessor",
    "SymptomTrendProcessor",
]
