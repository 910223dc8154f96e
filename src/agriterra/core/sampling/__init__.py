"""
Lattice sampling of validated polygons.
"""

from agriterra.core.sampling.planner import SamplingPlanner, plan_samples

__all__ = ["SamplingPlanner", "plan_samples"]
