"""Services package"""

from .project_aggregate import ProjectAggregateService, compute_progress, next_id

__all__ = ["ProjectAggregateService", "compute_progress", "next_id"]
