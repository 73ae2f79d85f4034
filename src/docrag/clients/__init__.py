"""Clients for remote model backends."""

from docrag.clients.ollama import OllamaClient

__all__ = ["OllamaClient"]
