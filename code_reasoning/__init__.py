"""Sequential thinking tool with branching and revision, served over MCP."""

__version__ = "0.7.0"
