"""Core pipeline: models, providers, errors, and synthesis workflow."""
