"""Command-line entry points (quote-refresh run | schedule | show-config)."""
