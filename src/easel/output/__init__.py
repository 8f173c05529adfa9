"""CLI output: result model, rich console and formatters."""
