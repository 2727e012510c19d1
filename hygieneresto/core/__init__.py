"""Configuration, security, events and services shared across the app."""
