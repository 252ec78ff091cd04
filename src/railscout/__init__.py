"""railscout: routing, router-layout checks and survey reconciliation for rail networks."""

__version__ = "0.1.0"
