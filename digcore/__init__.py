"""Building blocks for a host monitoring agent."""

__version__ = "0.1.0"