"""HTTP API for the ER data agent."""

from data_agent import __version__

__all__ = ["__version__"]
