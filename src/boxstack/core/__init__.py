"""Box model, stacking rules and search configuration."""
