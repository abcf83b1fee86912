"""Infrastructure services: the sandboxed render worker and its client."""
