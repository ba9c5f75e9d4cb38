"""
Image package for SlideReel.
"""

from .generator import ImageGenerator

__all__ = ["ImageGenerator"]
