"""Simulation layer for Cube Sandbox: shared world state, attraction, snake and market model."""
