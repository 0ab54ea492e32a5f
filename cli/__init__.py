"""harvest command-line interface."""
