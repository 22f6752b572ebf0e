"""Data model and error types shared by every component."""
