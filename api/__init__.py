"""HTTP surface: health check, middleware and error handlers."""
