from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from pg_batch_import.io.id_map import ExternalIdMap, SqliteExternalIdMap
from pg_batch_import.io.lines import LineSource, source_label
from pg_batch_import.sinks.base import GraphSink, IndexSink
from pg_batch_import.pipeline.node_loader import NodeLoader
from pg_batch_import.pipeline.relationship_loader import RelationshipLoader
from pg_batch_import.pipeline.rows import _p


# ============================================================
# Config / result
# ============================================================

def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ImportConfig:
    """
    Configuration container for a bulk import.

    Attributes:
        verbose (bool): Print pass banners, header decisions and a summary.
        id_map_db (Optional[str]): If set, keep the external id map in a
            SQLite database at this path instead of memory.
        progress_every (int): Print a progress line every N entities when
            verbose (0 disables).
    """

    verbose: bool = False
    id_map_db: Optional[str] = None
    progress_every: int = 100_000

    @classmethod
    def from_env(cls, verbose: bool = False) -> "ImportConfig":
        """
        Build a config from the environment (a `.env` file is loaded first).

        Reads PG_IMPORT_VERBOSE, PG_IMPORT_ID_MAP_DB and
        PG_IMPORT_PROGRESS_EVERY; unset variables keep their defaults.

        Args:
            verbose (bool): Verbosity used when PG_IMPORT_VERBOSE is unset.
        """
        load_dotenv()
        cfg = cls(verbose=verbose)
        cfg.verbose = _env_flag("PG_IMPORT_VERBOSE", cfg.verbose)
        cfg.id_map_db = os.getenv("PG_IMPORT_ID_MAP_DB") or cfg.id_map_db
        every = os.getenv("PG_IMPORT_PROGRESS_EVERY")
        if every:
            cfg.progress_every = int(every)
        return cfg


@dataclass
class ImportResult:
    """Diagnostics of a completed import."""

    nodes_created: int = 0
    relationships_created: int = 0
    warnings: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ============================================================
# Importer
# ============================================================

class Importer:
    """
    Two-phase bulk importer: every node first, then every relationship.

    The node pass runs to completion and its id map is frozen before the
    relationship pass opens its file, so no relationship is ever resolved
    against a partial map. Any error aborts the import; entities already
    written to the sink stay there.

    Example:
        sink = NetworkxGraphSink()
        result = Importer("nodes.tsv", "rels.tsv").import_to(sink, InMemoryIndexSink())
    """

    def __init__(
        self,
        nodes: LineSource,
        relationships: Optional[LineSource] = None,
        config: Optional[ImportConfig] = None,
    ):
        self.nodes = nodes
        self.relationships = relationships
        self.config = config or ImportConfig()

    def _new_id_map(self) -> ExternalIdMap:
        if self.config.id_map_db:
            return SqliteExternalIdMap(self.config.id_map_db)
        return ExternalIdMap()

    def _check_paths(self) -> None:
        for src in (self.nodes, self.relationships):
            if isinstance(src, (str, os.PathLike)) and not os.path.isfile(src):
                raise FileNotFoundError(f"Input file not found: {os.fspath(src)}")

    def import_to(self, sink: GraphSink, index_sink: Optional[IndexSink] = None) -> ImportResult:
        """
        Load the node file, then the relationship file, into `sink`.

        Args:
            sink (GraphSink): Destination graph store.
            index_sink (Optional[IndexSink]): Destination for index entries.
                Defaults to `sink` when it also implements IndexSink.

        Returns:
            ImportResult: Counts and warnings.

        Raises:
            FileNotFoundError: If an input path does not exist (checked
                before anything is written).
            DataImportError: On the first bad header, line or sink call.
        """
        cfg = self.config
        self._check_paths()
        if index_sink is None and isinstance(sink, IndexSink):
            index_sink = sink

        result = ImportResult()
        nodes_label = source_label(self.nodes, "<nodes>")
        rels_label = source_label(self.relationships, "<relationships>")

        id_map = self._new_id_map()
        try:
            _p(cfg.verbose, f">>> PASS 1: Nodes ({nodes_label})")
            node_loader = NodeLoader(
                self.nodes,
                id_map,
                label=nodes_label,
                verbose=cfg.verbose,
                progress_every=cfg.progress_every,
            )
            result.nodes_created = node_loader.load(sink, index_sink)
            result.warnings.extend(node_loader.warnings)
            id_map.freeze()

            _p(cfg.verbose, f">>> PASS 2: Relationships ({rels_label})")
            if self.relationships is None:
                result.warnings.append("no relationship file given; relationship pass skipped")
            else:
                rel_loader = RelationshipLoader(
                    self.relationships,
                    id_map,
                    label=rels_label,
                    verbose=cfg.verbose,
                    progress_every=cfg.progress_every,
                )
                result.relationships_created = rel_loader.load(sink, index_sink)
                result.warnings.extend(rel_loader.warnings)
        finally:
            id_map.close()

        _p(cfg.verbose, "\n Import complete.")
        _p(cfg.verbose, f"   Nodes: {result.nodes_created}")
        _p(cfg.verbose, f"   Relationships: {result.relationships_created}")
        for w in result.warnings:
            _p(cfg.verbose, f"   [WARN] {w}")
        return result


def run_import(
    nodes_path: LineSource,
    relationships_path: Optional[LineSource],
    sink: GraphSink,
    index_sink: Optional[IndexSink] = None,
    config: Optional[ImportConfig] = None,
) -> ImportResult:
    """
    Import a node file and an optional relationship file into a sink.

    Args:
        nodes_path (LineSource): Path to the node file.
        relationships_path (Optional[LineSource]): Path to the relationship
            file, or None to import nodes only.
        sink (GraphSink): Destination graph store.
        index_sink (Optional[IndexSink]): Destination for index entries.
        config (Optional[ImportConfig]): Import configuration.

    Returns:
        ImportResult: Counts and warnings.
    """
    return Importer(nodes_path, relationships_path, config=config).import_to(sink, index_sink)
