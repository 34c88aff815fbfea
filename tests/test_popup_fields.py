"""
Tests for the popup field values and the role -> ACF field key table.
"""

import pytest

from mapster_popups.config import Settings
from mapster_popups.constants import ACF_FIELD_ROLES, DEFAULT_ACF_FIELD_KEYS
from mapster_popups.exceptions import ConfigurationError
from mapster_popups.models import PopupFields, UpdateResult


def make_fields(**overrides):
    values = dict(
        style_id=667,
        header="Acme",
        image_source="feature-image",
        body="Main St 1\n10115 Berlin",
        button_action="to-directions",
        open_trigger="click",
        button_text="Zum Händler",
    )
    values.update(overrides)
    return PopupFields(**values)


class TestPopupFieldsToAcf:
    def test_default_keys_payload(self):
        acf = make_fields().to_acf(DEFAULT_ACF_FIELD_KEYS)
        assert acf == {
            "field_616a60c610c96": 1,
            "field_616a145a4f1eb": 667,
            "field_6168d546268fb": {
                "field_6169fc8a6e649": "Acme",
                "field_61db0c22f9454": "feature-image",
                "field_6169fc9c6e64a": "Main St 1\n10115 Berlin",
                "field_6169fda56e64f": "to-directions",
                "field_616a60fd2218f": "click",
                "field_6169fcbc6e64c": "Zum Händler",
            },
        }

    def test_custom_key_table(self):
        keys = {role: role.upper() for role in ACF_FIELD_ROLES}
        acf = make_fields(body="").to_acf(keys)
        assert acf["ENABLE_POPUP"] == 1
        assert acf["POPUP_FIELDS"]["BODY"] == ""
        assert acf["POPUP_FIELDS"]["HEADER"] == "Acme"

    def test_every_role_has_default_key(self):
        assert set(DEFAULT_ACF_FIELD_KEYS) == set(ACF_FIELD_ROLES)


class TestFieldKeyTable:
    def test_defaults_pass(self):
        settings = Settings(_env_file=None)
        assert settings.field_key_table() == DEFAULT_ACF_FIELD_KEYS

    def test_missing_role_fails_fast(self):
        keys = dict(DEFAULT_ACF_FIELD_KEYS)
        del keys["body"]
        settings = Settings(_env_file=None, acf_field_keys=keys)
        with pytest.raises(ConfigurationError) as exc:
            settings.field_key_table()
        assert "body" in str(exc.value)

    def test_table_from_environment(self, monkeypatch):
        keys = {role: f"field_{role}" for role in ACF_FIELD_ROLES}
        import json
        monkeypatch.setenv("ACF_FIELD_KEYS", json.dumps(keys))
        settings = Settings(_env_file=None)
        assert settings.field_key_table()["body"] == "field_body"


class TestSettings:
    def test_credential_aliases(self):
        settings = Settings(_env_file=None, wp_user="editor", wp_pass="secret")
        assert settings.wp_user_final == "editor"
        assert settings.wp_pass_final == "secret"

    def test_missing_credentials(self, monkeypatch):
        for var in ("WP_USERNAME", "WP_PASSWORD", "WP_USER", "WP_PASS"):
            monkeypatch.delenv(var, raising=False)
        with pytest.raises(ConfigurationError):
            Settings(_env_file=None).require_credentials()

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.post_type == "mapster-wp-location"
        assert settings.taxonomy == "wp-map-category"
        assert settings.category_slug == "haendler"
        assert settings.data_file == "output_converted.json"


class TestUpdateResult:
    def test_success_rate(self):
        assert UpdateResult(total=4, updated=3).success_rate == 75.0
        assert UpdateResult().success_rate == 0.0
