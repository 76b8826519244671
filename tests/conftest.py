"""
Shared fixtures for the importer tests.
"""
import pytest

from pg_batch_import.sinks import InMemoryIndexSink, NetworkxGraphSink


def _write_lines(path, lines):
    # one line per entry, newline-terminated
    text = "".join(f"{line}\n" for line in lines)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def write_files(tmp_path):
    """
    Returns a helper that writes node and relationship lines to temp files
    and returns their paths as strings.
    """

    def _write(node_lines, rel_lines=()):
        nodes = _write_lines(tmp_path / "nodes.tsv", node_lines)
        rels = _write_lines(tmp_path / "rels.tsv", rel_lines)
        return str(nodes), str(rels)

    return _write


@pytest.fixture
def graph_sink():
    return NetworkxGraphSink()


@pytest.fixture
def index_sink():
    return InMemoryIndexSink()


class RecordingSink:
    """GraphSink + IndexSink that records every call in order."""

    def __init__(self):
        self.calls = []
        self._next_node = 100
        self._next_rel = 500

    def create_node(self):
        self._next_node += 1
        self.calls.append(("create_node", self._next_node))
        return self._next_node

    def set_node_property(self, node_id, name, value):
        self.calls.append(("set_node_property", node_id, name, value))

    def create_relationship(self, start, end, type_label):
        self._next_rel += 1
        self.calls.append(("create_relationship", start, end, type_label, self._next_rel))
        return self._next_rel

    def set_relationship_property(self, rel_id, name, value):
        self.calls.append(("set_relationship_property", rel_id, name, value))

    def add_to_index(self, index_name, kind, entity_id, key, value):
        self.calls.append(("add_to_index", index_name, kind, entity_id, key, value))

    def names(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def recording_sink():
    return RecordingSink()
