"""Core inspection, compliance and scheduling logic."""
