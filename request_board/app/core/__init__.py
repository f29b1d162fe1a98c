"""Configuration, logging and database plumbing for the service."""
