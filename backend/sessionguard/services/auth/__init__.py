"""Session lifecycle: login, refresh-token rotation and logout."""
