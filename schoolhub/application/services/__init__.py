"""Application services (use cases). Repositories are injected by the API composition root."""
