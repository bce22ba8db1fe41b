"""Domain model, rounding policy, and metric assembly."""
