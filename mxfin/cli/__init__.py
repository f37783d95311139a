"""mx-fin command-line interface."""
