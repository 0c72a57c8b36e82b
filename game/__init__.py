"""Session wiring, configuration and clock helpers for the step-pet core."""
