"""Scene backends — the geometry adapter contract and an analytic implementation."""

from .adapter import ConnectorPose, GeometryAdapter, Handle, SceneError
from .analytic import AnalyticScene, prism_penetration

__all__ = [
    "ConnectorPose", "GeometryAdapter", "Handle", "SceneError",
    "AnalyticScene", "prism_penetration",
]
