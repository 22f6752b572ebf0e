"""Interactive session."""
