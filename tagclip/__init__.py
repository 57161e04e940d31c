"""tagclip - file captured content into user-defined knowledge-graph tags."""

__version__ = "0.1.0"
