"""Chat-style agent panel (locally simulated responder)."""
