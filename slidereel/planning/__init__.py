from .planner import SlidePlanner

__all__ = ["SlidePlanner"]
