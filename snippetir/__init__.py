"""A code model and token-based snippet templates for code generators."""

__version__ = "0.1.0"
__all__ = ["tokens", "mir", "body", "function", "rfunction"]