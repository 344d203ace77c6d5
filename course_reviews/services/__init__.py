"""Store, fan-out, and review action services."""
