"""
Import pipeline: the node pass, the relationship pass and the importer
that runs them in order.
"""

from pg_batch_import.pipeline.node_loader import NodeLoader
from pg_batch_import.pipeline.relationship_loader import RelationshipLoader
from pg_batch_import.pipeline.importer import ImportConfig, Importer, ImportResult, run_import

__all__ = [
    "NodeLoader",
    "RelationshipLoader",
    "ImportConfig",
    "Importer",
    "ImportResult",
    "run_import",
]
