"""
Тесты CLI seed_catalog.py
"""
import json

import pytest

from carpost_api.app.core.config import settings
from seed_catalog import main


CATALOG = [
    {"name": "Toyota", "models": [{"name": "Corolla", "generations": [{"name": "E210", "year_start": 2018}]}]},
]


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")
    return path


@pytest.fixture
def db_file(tmp_path, monkeypatch):
    # main() writes settings.database_url; monkeypatch restores it afterwards.
    monkeypatch.setattr(settings, "database_url", settings.database_url)
    return tmp_path / "seed.db"


class TestSeedCatalog:
    def test_seed_twice(self, catalog_file, db_file, capsys):
        assert main(["--db", str(db_file), str(catalog_file)]) == 0
        assert "Inserted 1 brand(s), 1 model(s), 1 generation(s)" in capsys.readouterr().out

        assert main(["--db", str(db_file), str(catalog_file)]) == 0
        assert "Inserted 0 brand(s), 0 model(s), 0 generation(s)" in capsys.readouterr().out

    def test_delete_brand(self, catalog_file, db_file, capsys):
        main(["--db", str(db_file), str(catalog_file)])

        assert main(["--db", str(db_file), "--delete-brand", "1"]) == 0
        assert "Brand 1 deleted" in capsys.readouterr().out
        assert main(["--db", str(db_file), "--delete-brand", "1"]) == 1

    def test_unreadable_catalog(self, tmp_path, db_file):
        assert main(["--db", str(db_file), str(tmp_path / "missing.json")]) == 1

    def test_requires_an_action(self, db_file):
        with pytest.raises(SystemExit):
            main(["--db", str(db_file)])

    def test_invalid_catalog_entry(self, tmp_path, db_file, capsys):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps([{"name": "Kia", "models": [{"generations": []}]}]), encoding="utf-8")

        assert main(["--db", str(db_file), str(path)]) == 1
        assert "Invalid catalog" in capsys.readouterr().err
