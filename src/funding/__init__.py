"""Aggregator funding.

Deployment-time step that sends one whole token to each aggregator contract
once they are deployed. Runs once per environment; never retries.
"""
