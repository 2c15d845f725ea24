"""deckweave: template-driven .pptx generation."""

__version__ = "0.1.0"
