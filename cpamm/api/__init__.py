"""HTTP API for constant-product pools."""
