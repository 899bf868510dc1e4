"""Tests for config file parsing."""

from pathlib import Path
from unittest.mock import patch

from tasksync.config import DATA_DIR, Config, _unquote, load_config


class TestLoadConfig:
    def test_defaults_when_missing(self, tmp_path):
        with patch("tasksync.config.CONFIG_FILE", tmp_path / "missing.conf"):
            config = load_config()

        assert config == Config()
        assert config.page_size == 20
        assert config.request_timeout == 10.0
        assert config.max_attempts == 3
        assert config.retry_base_delay == 1.0
        assert config.id_policy == "remote"

    def test_parses_values(self, tmp_path):
        config_file = tmp_path / "tasksync.conf"
        config_file.write_text(
            "# tasksync settings\n"
            'API_BASE_URL="https://example.com/api/"\n'
            "PAGE_SIZE=50  # bigger page\n"
            "REQUEST_TIMEOUT=2.5\n"
            "MAX_ATTEMPTS=5\n"
            "RETRY_BASE_DELAY=0.5\n"
            "ID_POLICY=local\n"
            "SIMULATE_FIELDS=false\n"
            "STORAGE_DIR='~/tasks'\n"
            "STORAGE_KEY=my_tasks\n"
            "USER_ID=7\n"
        )

        with patch("tasksync.config.CONFIG_FILE", config_file):
            config = load_config()

        assert config.api_base_url == "https://example.com/api"
        assert config.page_size == 50
        assert config.request_timeout == 2.5
        assert config.max_attempts == 5
        assert config.retry_base_delay == 0.5
        assert config.id_policy == "local"
        assert config.simulate_fields is False
        assert config.storage_dir == "~/tasks"
        assert config.storage_key == "my_tasks"
        assert config.user_id == 7

    def test_bad_number_keeps_default(self, tmp_path):
        config_file = tmp_path / "tasksync.conf"
        config_file.write_text("PAGE_SIZE=lots\n")

        with patch("tasksync.config.CONFIG_FILE", config_file):
            config = load_config()

        assert config.page_size == 20

    def test_unknown_id_policy_keeps_default(self, tmp_path):
        config_file = tmp_path / "tasksync.conf"
        config_file.write_text("ID_POLICY=random\n")

        with patch("tasksync.config.CONFIG_FILE", config_file):
            config = load_config()

        assert config.id_policy == "remote"

    def test_ignores_lines_without_equals(self, tmp_path):
        config_file = tmp_path / "tasksync.conf"
        config_file.write_text("garbage\nPAGE_SIZE=10\n")

        with patch("tasksync.config.CONFIG_FILE", config_file):
            config = load_config()

        assert config.page_size == 10


class TestUnquote:
    def test_double_quoted_keeps_hash(self):
        assert _unquote('"a # b" # note') == "a # b"

    def test_single_quoted(self):
        assert _unquote("'/tmp/my tasks'") == "/tmp/my tasks"

    def test_unterminated_quote_keeps_rest(self):
        assert _unquote('"open') == "open"

    def test_unquoted_strips_comment(self):
        assert _unquote("50  # bigger page") == "50"

    def test_plain_value(self):
        assert _unquote("local") == "local"

    def test_quoted_value_from_file(self, tmp_path):
        config_file = tmp_path / "tasksync.conf"
        config_file.write_text('STORAGE_KEY="tasks#v2"  # keyed\n')

        with patch("tasksync.config.CONFIG_FILE", config_file):
            config = load_config()

        assert config.storage_key == "tasks#v2"


class TestResolvedStorageDir:
    def test_default_is_data_dir(self):
        assert Config().resolved_storage_dir() == DATA_DIR

    def test_expands_user_path(self):
        config = Config(storage_dir="~/tasks")
        assert config.resolved_storage_dir() == Path("~/tasks").expanduser()
