from __future__ import annotations

from typing import Any, List, Optional

from pg_batch_import.errors import MalformedLine, UnknownNodeReference
from pg_batch_import.io.id_map import ExternalIdMap
from pg_batch_import.io.lines import LineSource
from pg_batch_import.schema.models import FileKind, Schema
from pg_batch_import.sinks.base import EntityKind, GraphSink, IndexSink
from pg_batch_import.pipeline.rows import SchemaStream, _p, call_sink, coerce_fields, write_properties

_IDENTITY_NAMES = ("from id", "to id", "relationship type")


class RelationshipLoader:
    """
    Single forward pass over a relationship file.

    Each data line `from<TAB>to<TAB>type[<TAB>props...]` becomes one
    directed relationship from `from` to `to`. Endpoints are resolved
    through the id map built by the node pass, which must be complete.

    Args:
        source (LineSource): Relationship file path or iterable of lines.
        id_map (ExternalIdMap): Complete map from the node pass.
        label (str): Source name used in errors and warnings.
        verbose (bool): Print progress.
        progress_every (int): Print a progress line every N relationships.
    """

    def __init__(
        self,
        source: LineSource,
        id_map: ExternalIdMap,
        *,
        label: str = "<relationships>",
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

    def _resolve(self, external_id: str, line_number: int, field_index: int) -> Any:
        internal = self.id_map.resolve(external_id)
        if internal is None:
            raise UnknownNodeReference(
                f"node id '{external_id}' does not appear in the node file",
                source=self.label,
                line_number=line_number,
                field_index=field_index,
            )
        return internal

    def load(self, sink: GraphSink, index_sink: Optional[IndexSink] = None) -> int:
        """
        Run the pass to exhaustion.

        Returns:
            int: Number of relationships created.
        """
        stream = SchemaStream(self.source, FileKind.RELATIONSHIP, self.label)
        self.schema = stream.schema
        if stream.header_line is not None:
            _p(self.verbose, f"   Relationships: {self.label} header with {len(self.schema.columns)} property columns")
        else:
            _p(self.verbose, f"   Relationships: {self.label} has no header (from/to/type only)")

        created = 0
        try:
            stream.require_index_sink(index_sink)
            for n, fields in stream:
                stream.check_width(fields, n)
                if len(fields) < 3:
                    raise MalformedLine(
                        f"expected from, to and type fields, got {len(fields)} field(s)",
                        source=self.label,
                        line_number=n,
                        field_index=len(fields),
                    )
                for i, name in enumerate(_IDENTITY_NAMES):
                    if fields[i] == "":
                        raise MalformedLine(f"empty {name}", source=self.label, line_number=n, field_index=i)

                from_id, to_id, rel_type = fields[0], fields[1], fields[2]
                start = self._resolve(from_id, n, 0)
                end = self._resolve(to_id, n, 1)

                values = coerce_fields(fields, self.schema, source=self.label, line_number=n)

                rel_id = call_sink(sink.create_relationship, start, end, rel_type, source=self.label, line_number=n)

                write_properties(
                    values, rel_id, EntityKind.RELATIONSHIP, sink.set_relationship_property, index_sink,
                    source=self.label, line_number=n,
                )

                created += 1
                if self.progress_every and created % self.progress_every == 0:
                    _p(self.verbose, f"      ... {created} relationships")
        finally:
            stream.close()

        self.warnings.extend(f"{self.label}: skipped empty line {n}" for n in stream.skipped_lines)
        return created
