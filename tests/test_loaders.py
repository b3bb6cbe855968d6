import pytest

from django_tenant_router import loaders


@pytest.fixture
def commands(monkeypatch):
    calls = []
    monkeypatch.setattr(loaders, "call_command", lambda *args, **kwargs: calls.append((args, kwargs)))
    return calls


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.py"
    path.write_text("connection.seen.append(('schema', tenant))\n")
    return str(path)


@pytest.fixture
def seed_file(tmp_path):
    path = tmp_path / "seeds.py"
    path.write_text("print('seeding plans')\nconnection.seen.append('seeded')\n")
    return str(path)


class TestImportDatabaseSchema:
    def test_structure_file_is_loaded_with_tenant_config(self, make_adapter, engine, tmp_path, schema_file):
        dump = tmp_path / "structure.sql"
        dump.write_text("CREATE TABLE invoices (id int);")
        adapter = make_adapter(DATABASE_STRUCTURE_FILE=dump, DATABASE_SCHEMA_FILE=schema_file)

        adapter.create("acme")

        assert engine.loaded == [(str(dump), "acme", None)]
        assert engine.connection.seen == []

    def test_schema_file_runs_when_structure_file_is_absent(self, make_adapter, engine, tmp_path, schema_file):
        adapter = make_adapter(DATABASE_STRUCTURE_FILE=tmp_path / "missing.sql", DATABASE_SCHEMA_FILE=schema_file)

        adapter.create("acme")

        assert engine.loaded == []
        assert engine.connection.seen == [("schema", "acme")]

    def test_missing_schema_file_aborts(self, make_adapter, tmp_path):
        missing = tmp_path / "schema.py"
        adapter = make_adapter(DATABASE_SCHEMA_FILE=missing)

        with pytest.raises(SystemExit) as excinfo:
            adapter.create("acme")

        assert str(excinfo.value) == f"{missing} doesn't exist yet"
        assert adapter.current_tenant() == "main"

    def test_migrate_runs_when_no_files_are_configured(self, make_adapter, commands):
        adapter = make_adapter(MIGRATE_AFTER_CREATE=True)

        adapter.create("acme")

        assert commands == [(("migrate",), {"database": "default", "interactive": False, "verbosity": 0})]

    def test_nothing_runs_by_default(self, make_adapter, engine, commands):
        make_adapter().create("acme")

        assert commands == []
        assert engine.loaded == []


class TestSeedData:
    def test_fixtures_are_loaded(self, make_adapter, commands):
        adapter = make_adapter(SEED_AFTER_CREATE=True, SEED_FIXTURES=["plans", "currencies"])

        adapter.create("acme")

        assert commands == [(("loaddata", "plans", "currencies"), {"database": "default", "verbosity": 0})]

    def test_fixtures_take_precedence_over_seed_file(self, make_adapter, engine, commands, seed_file):
        adapter = make_adapter(SEED_FIXTURES=["plans"], SEED_FILE=seed_file)

        adapter.seed()

        assert len(commands) == 1
        assert engine.connection.seen == []

    def test_seed_file_output_is_suppressed(self, make_adapter, engine, seed_file, capsys):
        adapter = make_adapter(SEED_AFTER_CREATE=True, SEED_FILE=seed_file)

        adapter.create("acme")

        assert engine.connection.seen == ["seeded"]
        assert capsys.readouterr().out == ""

    def test_seed_is_skipped_unless_enabled(self, make_adapter, engine, seed_file):
        make_adapter(SEED_FILE=seed_file).create("acme")

        assert engine.connection.seen == []

    def test_missing_seed_file_aborts(self, make_adapter, tmp_path):
        adapter = make_adapter(SEED_FILE=str(tmp_path / "seeds.py"))

        with pytest.raises(SystemExit):
            adapter.seed_data()


class TestLoadOrAbort:
    def test_returns_module_globals(self, tmp_path):
        path = tmp_path / "values.py"
        path.write_text("answer = base + 1\n")

        assert loaders.load_or_abort(str(path), {"base": 41})["answer"] == 42
