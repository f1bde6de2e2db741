from pathlib import Path

import pytest

from crm_dedupe.config import Settings, StoreSettings, find_config, load_settings
from crm_dedupe.errors import ConfigError
from crm_dedupe.service import CustomerDedupService
from crm_dedupe.steps.matching import MatchPolicy
from crm_dedupe.stores import InMemoryCustomerStore
from crm_dedupe.models import CustomerRecord


def test_defaults_match_policy_constants() -> None:
    settings = Settings()

    assert MatchPolicy.from_settings(settings.matching) == MatchPolicy()
    assert settings.clustering.primary_order == "scan"
    assert settings.store.database_path.is_absolute()


def test_load_yaml_overrides(tmp_path: Path) -> None:
    path = tmp_path / "crm-dedupe.yaml"
    path.write_text(
        "matching:\n"
        "  candidate_threshold: 90\n"
        "clustering:\n"
        "  primary_order: created_at\n"
        "store:\n"
        f"  database_path: {tmp_path / 'crm.sqlite3'}\n"
        "logging:\n"
        "  level: DEBUG\n",
        encoding="utf-8",
    )

    settings = Settings.load(path)

    assert settings.matching.candidate_threshold == 90
    assert settings.matching.email_weight == 100
    assert settings.clustering.primary_order == "created_at"
    assert settings.store.database_path == (tmp_path / "crm.sqlite3").resolve()
    assert settings.logging.level == "DEBUG"


def test_invalid_primary_order_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("clustering:\n  primary_order: newest\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        Settings.load(path)


def test_missing_file_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        Settings.load(tmp_path / "absent.yaml")


def test_find_config_falls_back_to_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert find_config(None) is None
    assert load_settings(None) == Settings()

    (tmp_path / "crm-dedupe.yml").write_text("matching:\n  phone_weight: 50\n", encoding="utf-8")
    assert find_config(None) == tmp_path / "crm-dedupe.yml"
    assert load_settings(None).matching.phone_weight == 50


def test_service_from_settings_uses_threshold(tmp_path: Path) -> None:
    path = tmp_path / "crm-dedupe.yaml"
    path.write_text("matching:\n  candidate_threshold: 90\n", encoding="utf-8")
    store = InMemoryCustomerStore(
        [
            CustomerRecord("a", "", "Ann", "Lee", "555-111-2222"),
            CustomerRecord("b", "", "Zed", "Zulu", "5551112222"),
        ]
    )

    assert CustomerDedupService(store).find_duplicates() != []
    assert CustomerDedupService.from_settings(store, Settings.load(path)).find_duplicates() == []


def test_default_database_path_is_resolved(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    settings = StoreSettings()

    assert settings.database_path == (tmp_path / "data" / "crm.sqlite3").resolve()
