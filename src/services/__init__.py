"""Project store, generation recorder and orchestration services."""
