"""HTTP API for the render worker."""
