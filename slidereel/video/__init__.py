"""
Video package for SlideReel.
"""

from .ffmpeg import FFmpegEncoder, parse_probe_duration

__all__ = ["FFmpegEncoder", "parse_probe_duration"]
