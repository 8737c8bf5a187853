"""HTTP API for the simulation pipeline."""
