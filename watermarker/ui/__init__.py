"""
UI Module - Console Interface
=============================
Interactive prompts for the watermark run.
"""

from .console import ConsolePrompter

__all__ = ["ConsolePrompter"]
