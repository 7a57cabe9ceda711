"""leadsplit - agent administration and round-robin lead list distribution."""

__version__ = "1.0.0"
