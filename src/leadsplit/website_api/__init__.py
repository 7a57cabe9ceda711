"""HTTP API for agent administration and lead list uploads."""
