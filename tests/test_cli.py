"""
Tests for the update_mapster_locations command line trigger.
"""

import json
import logging

import pytest

import update_mapster_locations as cli
from mapster_popups.logging_config import JsonFormatter, setup_logging
from mapster_popups.wordpress import WordPressClient

from conftest import FakeResponse


@pytest.fixture
def patched(monkeypatch, settings, client, session):
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    monkeypatch.setattr(cli, "setup_logging", lambda s: logging.getLogger("mapster_popups"))
    monkeypatch.setattr(WordPressClient, "from_settings", classmethod(lambda cls, s: client))
    session.routes.update({
        ("GET", "users/me"): FakeResponse(200, {"slug": "admin", "capabilities": {"manage_options": True}}),
        ("GET", "types/mapster-wp-location"): FakeResponse(200, {"rest_base": "locs"}),
        ("GET", "locs"): FakeResponse(200, [{"id": 1, "title": {"raw": "Acme"}, "acf": {}}]),
        ("POST", "locs/1"): lambda **kw: FakeResponse(200, {"id": 1}),
        ("GET", "taxonomies/wp-map-category"): FakeResponse(200, {"rest_base": "wp-map-category"}),
        ("GET", "wp-map-category"): FakeResponse(200, [{"id": 9, "slug": "haendler"}]),
    })
    return session


class TestTrigger:
    def test_without_flag_does_nothing(self, patched, capsys):
        assert cli.main([]) == 0
        assert patched.calls == []
        assert "--update-mapster yes" in capsys.readouterr().out

    def test_wrong_value_does_nothing(self, patched, caplog):
        with caplog.at_level("INFO"):
            assert cli.main(["--update-mapster", "no"]) == 0
        assert patched.calls == []
        assert "trigger flag is present" in caplog.text

    def test_yes_runs_update(self, patched, capsys):
        assert cli.main(["--update-mapster", "yes"]) == 0
        out = capsys.readouterr().out
        assert "Updated:     1" in out
        assert "Categorized: 1" in out
        assert patched.closed is True

    def test_dry_run(self, patched, capsys):
        assert cli.main(["--update-mapster", "yes", "--dry-run"]) == 0
        assert "(dry run)" in capsys.readouterr().out
        assert patched.calls_to("POST", "locs/1") == []

    def test_overrides_data_file_and_category(self, patched, settings, tmp_path):
        data = tmp_path / "other.json"
        data.write_text("[]", encoding="utf-8")
        cli.main(["--update-mapster", "yes", "--data-file", str(data), "--category", "partner"])
        assert settings.data_file == str(data)
        assert patched.calls_to("GET", "wp-map-category")[0]["params"]["slug"] == "partner"

    def test_abort_exit_code(self, patched, capsys):
        patched.routes[("GET", "users/me")] = FakeResponse(200, {"slug": "editor", "capabilities": {}})
        assert cli.main(["--update-mapster", "yes"]) == 1
        assert "Aborted" in capsys.readouterr().out

    @pytest.mark.parametrize("limit", ["0", "-3"])
    def test_limit_below_one_rejected(self, patched, limit):
        with pytest.raises(SystemExit):
            cli.main(["--update-mapster", "yes", "--limit", limit])
        assert patched.calls == []

    def test_missing_credentials(self, monkeypatch, settings):
        monkeypatch.setattr(cli, "get_settings", lambda: settings)
        monkeypatch.setattr(cli, "setup_logging", lambda s: None)
        settings.wp_username = None
        settings.wp_user = None
        assert cli.main(["--update-mapster", "yes"]) == 1


class TestLogging:
    def test_json_formatter(self):
        record = logging.LogRecord("mapster_popups.x", logging.WARNING, __file__, 1, "⚠️ %s", ("hi",), None)
        payload = json.loads(JsonFormatter().format(record))
        assert payload["level"] == "WARNING"
        assert payload["message"] == "⚠️ hi"

    def test_setup_logging_writes_file(self, settings):
        settings.log_format = "json"
        logger = setup_logging(settings, name="mapster_popups_test")
        try:
            logger.warning("hello")
            for handler in logger.handlers:
                handler.flush()
            log_file = settings.log_dir + "/mapster_popups_test.log"
            line = open(log_file, encoding="utf-8").read().strip()
            assert json.loads(line)["message"] == "hello"
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
