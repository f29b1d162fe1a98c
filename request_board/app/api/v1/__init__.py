"""Version 1 of the Request Board API."""
