"""Ollama client wrapper and integration layer.

This package provides the async model client the conversation loop talks to.
"""

from aifns.ollama.client import OllamaClient

__all__ = ["OllamaClient"]
