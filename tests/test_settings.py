# tests/test_settings.py
"""
Unit tests for TimeSheet.settings.lib
(covers the section validator, ConfigPaths, SettingsAPI loading and environment overrides).

Run with:
    python -m unittest tests.test_settings
"""

from __future__ import annotations

import json
import os
import unittest
from pathlib import Path
from typing import Any, Dict
from unittest.mock import patch

from TimeSheet.core.auth import AuthStrategy
from TimeSheet.core.entry import WeekdaySource
from TimeSheet.settings import lib
from TimeSheet.settings.lib import CONFIG_SCHEMA, SettingsAPI, _validate_section
from TimeSheet.status import status
from tests.base import BaseTestCase

DUMMY_SECRET = {
    "installed": {
        "client_id": "dummy",
        "project_id": "dummy",
        "client_secret": "dummy",
        "auth_uri": "https://example",
        "token_uri": "https://example",
    }
}


def minimal_config() -> Dict[str, Any]:
    return {
        "spreadsheet": {"id": "sheet-123"},
        "auth": {"strategy": "access_token"},
        "metadata": {
            "name": "Test",
            "theme": "dark",
            "weekday_source": "selected_month",
        },
    }


def write_json(path: Path, data: Dict[str, Any]) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=4)


class ValidateSectionTests(unittest.TestCase):
    schema = CONFIG_SCHEMA["metadata"]["item_schema"]

    def test_valid(self):
        _validate_section("metadata", minimal_config()["metadata"], self.schema)

    def test_not_a_dict(self):
        with self.assertRaises(TypeError):
            _validate_section("metadata", ["x"], self.schema)

    def test_missing_field(self):
        data = minimal_config()["metadata"]
        del data["theme"]
        with self.assertRaises(ValueError):
            _validate_section("metadata", data, self.schema)

    def test_wrong_type(self):
        data = minimal_config()["metadata"]
        data["name"] = 1
        with self.assertRaises(TypeError):
            _validate_section("metadata", data, self.schema)

    def test_value_not_allowed(self):
        data = minimal_config()["metadata"]
        data["weekday_source"] = "yesterday"
        with self.assertRaises(ValueError):
            _validate_section("metadata", data, self.schema)


class RealTemplateSmokeTest(BaseTestCase):
    def test_templates_exist(self):
        cp = lib.ConfigPaths()
        self.assertTrue(cp.client_secret_template.exists())
        self.assertTrue(cp.config_template.exists())
        self.assertTrue(cp.stylesheet_path.exists())

    def test_user_files_seeded_from_templates(self):
        self.assertTrue(self.config_paths.config_path.exists())
        self.assertTrue(self.config_paths.client_secret_path.exists())
        self.assertEqual(
            json.loads(self.config_paths.config_path.read_text(encoding="utf-8")),
            json.loads(self.config_paths.config_template.read_text(encoding="utf-8")),
        )

    def test_template_defaults(self):
        self.assertEqual(lib.settings.spreadsheet_id, "")
        self.assertEqual(lib.settings.auth_strategy, AuthStrategy.AccessToken)
        self.assertEqual(lib.settings.weekday_source, WeekdaySource.CurrentMonth)
        self.assertEqual(lib.settings["name"], "UIH/HRS Timeseddel")


class SettingsAPIBehaviour(BaseTestCase):
    """Functional coverage for SettingsAPI."""

    def setUp(self) -> None:
        super().setUp()

        write_json(self.config_paths.config_path, minimal_config())
        write_json(self.config_paths.client_secret_path, DUMMY_SECRET)

        self.api: SettingsAPI = lib.settings
        self.api.load_config()
        self.api.load_client_secret()

    def test_loaded_values(self):
        self.assertEqual(self.api.spreadsheet_id, "sheet-123")
        self.assertEqual(self.api.weekday_source, WeekdaySource.SelectedMonth)
        self.assertEqual(self.api.client_id, "dummy")

    def test_metadata_access(self):
        self.assertEqual(self.api["name"], "Test")
        self.assertEqual(self.api["theme"], "dark")
        with self.assertRaises(KeyError):
            _ = self.api["bogus"]

    def test_init_data_reloads_from_disk(self):
        data = minimal_config()
        data["spreadsheet"]["id"] = "other"
        write_json(self.api.config_path, data)

        self.api.init_data()
        self.assertEqual(self.api.spreadsheet_id, "other")

    def test_invalid_file_keeps_loaded_values(self):
        data = minimal_config()
        data["spreadsheet"]["id"] = 42
        write_json(self.api.config_path, data)

        with self.assertRaises(status.ConfigInvalidException):
            self.api.load_config()
        self.assertEqual(self.api.spreadsheet_id, "sheet-123")

    def test_load_config_missing(self):
        self.api.config_path.unlink()
        with self.assertRaises(status.ConfigNotFoundException):
            self.api.load_config()

    def test_load_config_invalid_json(self):
        self.api.config_path.write_text("not json", encoding="utf-8")
        with self.assertRaises(status.ConfigInvalidException):
            self.api.load_config()

    def test_load_config_missing_section(self):
        data = minimal_config()
        del data["auth"]
        write_json(self.api.config_path, data)
        with self.assertRaises(status.ConfigInvalidException):
            self.api.load_config()

    def test_validate_client_secret_missing_section(self):
        with self.assertRaises(status.ClientSecretInvalidException):
            self.api.validate_client_secret({"bogus": {}})

    def test_validate_client_secret_missing_fields(self):
        bad = {"installed": {"client_id": "only"}}
        with self.assertRaises(status.ClientSecretInvalidException):
            self.api.validate_client_secret(bad)

    def test_validate_client_secret_web_section(self):
        self.assertEqual(self.api.validate_client_secret({"web": DUMMY_SECRET["installed"]}), "web")

    def test_load_client_secret_missing(self):
        self.api.client_secret_path.unlink()
        with self.assertRaises(status.ClientSecretNotFoundException):
            self.api.load_client_secret()

    def test_load_client_secret_invalid_json(self):
        self.api.client_secret_path.write_text("{", encoding="utf-8")
        with self.assertRaises(status.ClientSecretInvalidException):
            self.api.load_client_secret()

    def test_get_client_config_missing_file(self):
        self.api.client_secret_path.unlink()
        with self.assertRaises(status.ClientSecretNotFoundException):
            self.api.get_client_config()

    def test_get_client_config_is_a_copy(self):
        config = self.api.get_client_config()
        config["installed"]["client_id"] = "changed"
        self.assertEqual(self.api.client_id, "dummy")


class EnvironmentOverrideTests(BaseTestCase):

    def test_spreadsheet_id_env_wins(self):
        self.set_spreadsheet_id("from-config")
        with patch.dict(os.environ, {lib.SPREADSHEET_ID_ENV_KEY: "from-env"}):
            self.assertEqual(lib.settings.spreadsheet_id, "from-env")
        self.assertEqual(lib.settings.spreadsheet_id, "from-config")

    def test_blank_env_is_ignored(self):
        self.set_spreadsheet_id("from-config")
        with patch.dict(os.environ, {lib.SPREADSHEET_ID_ENV_KEY: "  "}):
            self.assertEqual(lib.settings.spreadsheet_id, "from-config")

    def test_client_id_env_wins(self):
        self.set_client_secret(client_id="from-file")
        with patch.dict(os.environ, {lib.CLIENT_ID_ENV_KEY: "from-env"}):
            self.assertEqual(lib.settings.client_id, "from-env")
        self.assertEqual(lib.settings.client_id, "from-file")


if __name__ == "__main__":
    unittest.main()
