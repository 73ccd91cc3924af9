"""Simulation module for demo mode without exchange access."""

from arbscan.simulation.market import SimulatedAsset, SyntheticSnapshotProvider


__all__ = [
    "SimulatedAsset",
    "SyntheticSnapshotProvider",
]
