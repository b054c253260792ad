"""Contracts package.

This package defines the shapes the deployment harness hands us: per-network
settings entries and the deployed-contracts mapping. Anything read from disk
goes through `src.contracts.validation` before it reaches the funding step.
"""
