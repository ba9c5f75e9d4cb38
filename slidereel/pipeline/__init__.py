"""
Pipeline package for SlideReel.

Per-slide rendering, segment concatenation, the bounded worker pool and the
orchestrator that ties them together for every item of the content queue.
"""

from .concatenator import Concatenator
from .orchestrator import ItemRun, Orchestrator
from .pool import BoundedPool
from .renderer import SlideRenderer

__all__ = ["BoundedPool", "Concatenator", "ItemRun", "Orchestrator", "SlideRenderer"]
