"""Click command groups for the gamelib CLI."""
