"""Core profile model, editing engine, and persistence."""
