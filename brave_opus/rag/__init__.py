"""Retrieval-augmented answering over Brave web results."""

from brave_opus.rag.html_text import html_to_text
from brave_opus.rag.pipeline import RagPipeline

__all__ = ["RagPipeline", "html_to_text"]
