"""Admin API for the recipe acquisition pipeline."""
