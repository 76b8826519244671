"""
Sink layer: where imported entities are written.

`GraphSink` and `IndexSink` are the narrow protocols the importer depends
on. `NetworkxGraphSink` and `InMemoryIndexSink` are ready-made
implementations used by the command line entry point and the tests.
"""

from pg_batch_import.sinks.base import EntityKind, GraphSink, IndexSink
from pg_batch_import.sinks.networkx_sink import NetworkxGraphSink
from pg_batch_import.sinks.memory_index import InMemoryIndexSink

__all__ = [
    "EntityKind",
    "GraphSink",
    "IndexSink",
    "NetworkxGraphSink",
    "InMemoryIndexSink",
]
