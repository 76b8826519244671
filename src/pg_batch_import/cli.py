from __future__ import annotations

import argparse
import json
import os
import sys
from typing import List, Optional

from pg_batch_import.errors import DataImportError
from pg_batch_import.pipeline.importer import ImportConfig, run_import
from pg_batch_import.sinks import InMemoryIndexSink, NetworkxGraphSink


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Bulk-load a property graph from tab-separated node/relationship files")
    ap.add_argument("nodes", help="Node file (id<TAB>props...)")
    ap.add_argument("relationships", nargs="?", default=None, help="Relationship file (from<TAB>to<TAB>type<TAB>props...)")
    ap.add_argument("--output", help="Write the imported graph as node-link JSON to this path")
    ap.add_argument("--id-map-db", help="Keep the external id map in a SQLite file instead of memory")
    ap.add_argument("--quiet", action="store_true", help="Only print errors")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # verbose unless --quiet or PG_IMPORT_VERBOSE says otherwise
    cfg = ImportConfig.from_env(verbose=True)
    if args.quiet:
        cfg.verbose = False
    if args.id_map_db:
        cfg.id_map_db = args.id_map_db

    sink = NetworkxGraphSink()
    index_sink = InMemoryIndexSink()

    try:
        result = run_import(args.nodes, args.relationships, sink, index_sink, config=cfg)
    except (DataImportError, FileNotFoundError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    if args.output:
        parent_dir = os.path.dirname(args.output)
        if parent_dir:
            os.makedirs(parent_dir, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(sink.to_node_link(), f, indent=2)
        if cfg.verbose:
            print(f"   Graph written to {args.output}")

    if cfg.verbose:
        print(json.dumps(result.as_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
