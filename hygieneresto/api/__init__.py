"""REST API: routers and the error envelope."""
