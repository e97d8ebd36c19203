"""ttrack MCP: task time tracking with period analytics and goals."""

__version__ = "0.1.0"

__all__ = ["__version__"]
