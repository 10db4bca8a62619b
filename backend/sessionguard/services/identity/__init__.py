"""User registration and profile management."""
