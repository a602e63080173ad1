"""brave-opus: Anthropic Messages streaming client, Brave Search client and a small RAG runner."""

__version__ = "0.1.0"
