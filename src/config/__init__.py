"""Configuration: settings file and generation constants."""
