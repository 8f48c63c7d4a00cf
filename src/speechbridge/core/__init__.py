"""Configuration, logging and shared models."""
