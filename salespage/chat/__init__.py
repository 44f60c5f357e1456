"""
Chat layer: answers shopper questions from extracted sales page data.
"""

from .responder import ChatService, KeywordResponder, build_prompt

__all__ = ['ChatService', 'KeywordResponder', 'build_prompt']
