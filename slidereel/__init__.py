"""
SlideReel: turn a queue of content descriptors into narrated vertical slide videos.
"""

__version__ = "0.1.0"
