"""Render module for planning report display."""

from render.renderers import (
    BaseRenderer,
    SummaryRenderer,
    TaxDetailsRenderer,
    ProjectionRenderer,
    DebtPayoffRenderer,
    ScenarioRenderer,
    BenchmarksRenderer,
    RENDERER_REGISTRY,
)

__all__ = [
    'BaseRenderer',
    'SummaryRenderer',
    'TaxDetailsRenderer',
    'ProjectionRenderer',
    'DebtPayoffRenderer',
    'ScenarioRenderer',
    'BenchmarksRenderer',
    'RENDERER_REGISTRY',
]
