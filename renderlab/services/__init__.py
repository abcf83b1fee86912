"""Services used by the render worker."""
