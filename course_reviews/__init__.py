"""Course and professor reviews: subscriptions, votes and notification fan-out."""

__version__ = "1.0.0"
