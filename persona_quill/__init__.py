"""Learn writing styles from sample text and synthesize persona-aware generation prompts."""

__version__ = "0.1.0"
