"""Environment, logging and error handling helpers."""
