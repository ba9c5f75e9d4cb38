"""
Audio package for SlideReel.

Contains speech synthesis providers and the audio generator.
"""

from .generator import AudioGenerator, sanitize_speech_text
from .tts_factory import TTSFactory
from .tts_interface import TTSInterface

__all__ = ["AudioGenerator", "TTSFactory", "TTSInterface", "sanitize_speech_text"]
