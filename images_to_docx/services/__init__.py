"""Service layer: the batch pipeline that ties the components together."""
from .pipeline import ImagePipeline

__all__ = ["ImagePipeline"]
