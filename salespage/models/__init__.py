"""
Data models for sales page extraction.

This module contains pure data classes with no business logic.
"""

from .result import ErrorInfo, ExtractionResult

__all__ = ['ErrorInfo', 'ExtractionResult']
