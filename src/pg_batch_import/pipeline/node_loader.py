from __future__ import annotations

from typing import List, Optional

from pg_batch_import.errors import DuplicateExternalId, MalformedLine, SinkFailure
from pg_batch_import.io.id_map import ExternalIdMap
from pg_batch_import.io.lines import LineSource
from pg_batch_import.schema.models import FileKind, Schema
from pg_batch_import.sinks.base import EntityKind, GraphSink, IndexSink
from pg_batch_import.pipeline.rows import SchemaStream, _p, call_sink, coerce_fields, write_properties


class NodeLoader:
    """
    Single forward pass over a node file.

    Creates one node per data line, applies its typed properties and index
    entries, and records `external id -> internal id` in the id map.

    Args:
        source (LineSource): Node file path or iterable of lines.
        id_map (ExternalIdMap): Map to fill; must be writable.
        label (str): Source name used in errors and warnings.
        verbose (bool): Print progress.
        progress_every (int): Print a progress line every N nodes (0 = never).
    """

    def __init__(
        self,
        source: LineSource,
        id_map: ExternalIdMap,
        *,
        label: str = "<nodes>",
        verbose: bool = False,
        progress_every: int = 0,
    ):
        self.source = source
        self.id_map = id_map
        self.label = label
        self.verbose = verbose
        self.progress_every = progress_every
        self.schema: Optional[Schema] = None
        self.warnings: List[str] = []

    def load(self, sink: GraphSink, index_sink: Optional[IndexSink] = None) -> int:
        """
        Run the pass to exhaustion.

        Returns:
            int: Number of nodes created.

        Raises:
            InvalidColumnSpec, PropertyTypeError, MalformedLine,
            DuplicateExternalId, SinkFailure: On the first bad line.
        """
        stream = SchemaStream(self.source, FileKind.NODE, self.label)
        self.schema = stream.schema
        if stream.header_line is not None:
            _p(self.verbose, f"   Nodes: {self.label} header with {len(self.schema.columns)} property columns")
        else:
            _p(self.verbose, f"   Nodes: {self.label} has no header (id column only)")

        created = 0
        try:
            stream.require_index_sink(index_sink)
            for n, fields in stream:
                stream.check_width(fields, n)

                external_id = fields[0]
                if external_id == "":
                    raise MalformedLine("empty node id", source=self.label, line_number=n, field_index=0)

                values = coerce_fields(fields, self.schema, source=self.label, line_number=n)

                if external_id in self.id_map:
                    raise DuplicateExternalId(
                        f"node id '{external_id}' already defined",
                        source=self.label,
                        line_number=n,
                        field_index=0,
                    )

                node_id = call_sink(sink.create_node, source=self.label, line_number=n)
                try:
                    self.id_map.add(external_id, node_id)
                except SinkFailure as e:
                    raise e.locate(self.label, n)

                write_properties(
                    values, node_id, EntityKind.NODE, sink.set_node_property, index_sink,
                    source=self.label, line_number=n,
                )

                created += 1
                if self.progress_every and created % self.progress_every == 0:
                    _p(self.verbose, f"      ... {created} nodes")
        finally:
            stream.close()

        self.warnings.extend(f"{self.label}: skipped empty line {n}" for n in stream.skipped_lines)
        return created
