"""Issue Mirror - keep a local Markdown mirror of a GitHub repository's issues."""

__version__ = "0.1.0"
