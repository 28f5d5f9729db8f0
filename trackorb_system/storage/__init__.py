"""
TrackOrb Storage
CSV artifacts per session: raw, conditioned (processed_) and calculated_
"""

from .artifact_store import ArtifactStore

__all__ = [
    'ArtifactStore',
]
