"""HTTP API of the Backend Aggregation Service."""
