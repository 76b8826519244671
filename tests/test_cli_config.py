import json

import pytest

from pg_batch_import import ImportConfig
from pg_batch_import.cli import main

ENV_VARS = ("PG_IMPORT_VERBOSE", "PG_IMPORT_ID_MAP_DB", "PG_IMPORT_PROGRESS_EVERY")


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_config_defaults(clean_env):
    cfg = ImportConfig.from_env()
    assert cfg.verbose is False
    assert cfg.id_map_db is None
    assert cfg.progress_every == 100_000


def test_config_from_env_vars(clean_env):
    clean_env.setenv("PG_IMPORT_VERBOSE", "true")
    clean_env.setenv("PG_IMPORT_ID_MAP_DB", "/tmp/ids.sqlite")
    clean_env.setenv("PG_IMPORT_PROGRESS_EVERY", "50")
    cfg = ImportConfig.from_env()
    assert cfg.verbose is True
    assert cfg.id_map_db == "/tmp/ids.sqlite"
    assert cfg.progress_every == 50


def test_cli_writes_graph(write_files, tmp_path, clean_env, capsys):
    nodes, rels = write_files(["id\tname", "1\ta", "2\tb"], ["1\t2\tKNOWS"])
    out = tmp_path / "out" / "graph.json"

    code = main([nodes, rels, "--output", str(out), "--quiet"])

    assert code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert len(data["nodes"]) == 2
    assert len(data["edges"]) == 1
    assert data["edges"][0]["type"] == "KNOWS"
    assert capsys.readouterr().out == ""


def test_cli_prints_summary(write_files, clean_env, capsys):
    nodes, rels = write_files(["1", "2"], ["1\t2\tKNOWS"])
    assert main([nodes, rels]) == 0
    out = capsys.readouterr().out
    assert '"relationships_created": 1' in out


def test_cli_reports_import_errors(write_files, clean_env, capsys):
    nodes, rels = write_files(["1"], ["1\t2\tKNOWS"])
    assert main([nodes, rels, "--quiet"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("[ERROR]")
    assert "line 1" in err


def test_cli_respects_verbose_env_var(write_files, clean_env, capsys):
    clean_env.setenv("PG_IMPORT_VERBOSE", "false")
    nodes, rels = write_files(["1", "2"], ["1\t2\tKNOWS"])
    assert main([nodes, rels]) == 0
    assert capsys.readouterr().out == ""


def test_cli_reports_undecodable_input(tmp_path, clean_env, capsys):
    nodes = tmp_path / "nodes.tsv"
    nodes.write_bytes(b"1\n\xff\n")
    assert main([str(nodes), "--quiet"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("[ERROR]")
    assert "line 2" in err


def test_cli_missing_file(tmp_path, clean_env, capsys):
    assert main([str(tmp_path / "nope.tsv"), "--quiet"]) == 1
    assert "not found" in capsys.readouterr().err


def test_cli_usage_error(clean_env):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


def test_cli_sqlite_id_map(write_files, tmp_path, clean_env):
    nodes, rels = write_files(["1", "2"], ["2\t1\tKNOWS"])
    assert main([nodes, rels, "--id-map-db", str(tmp_path / "ids.sqlite"), "--quiet"]) == 0
    assert (tmp_path / "ids.sqlite").exists()
