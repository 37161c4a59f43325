"""Command-line interface for research-orchestrator."""
