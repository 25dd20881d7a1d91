"""HTTP API for running replication jobs."""
