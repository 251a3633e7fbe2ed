"""Core primitives shared across navguard."""
