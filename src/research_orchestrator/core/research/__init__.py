"""Research synthesis core: text utilities, models, providers and workflows."""
