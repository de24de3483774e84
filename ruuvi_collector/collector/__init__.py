"""
Collector pipeline and MAC filtering.
"""

from .filters import FilterMode, MacFilter
from .pipeline import CollectorPipeline

__all__ = ['CollectorPipeline', 'FilterMode', 'MacFilter']
