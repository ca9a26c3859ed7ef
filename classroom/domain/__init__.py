"""Domain types and rules independent of persistence."""
