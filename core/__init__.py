"""Core: configuration, billing calculator, timezone lookup, dependencies."""
