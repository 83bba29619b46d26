"""Core provider contract, resilience primitives, and the retrying wrapper."""
