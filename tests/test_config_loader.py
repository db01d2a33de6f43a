"""Tests for coinchart.config.loader.Config with temporary config files."""
import pytest

from coinchart.config.loader import Config

INI = """
[general]
logger_debug = true
default_coin = ethereum
default_currency = eur
default_range_days = 30

[coingecko]
base_url = https://pro-api.coingecko.com/api/v3/

[http]
request_timeout_seconds = 20
max_retries = -3
retry_initial_delay = 0.5

[analysis]
google_studio_model = gemini-2.5-flash
temperature = 0.2
max_tokens = 512
"""


@pytest.fixture(autouse=True)
def _clear_secret_env(monkeypatch):
    monkeypatch.delenv("GOOGLE_STUDIO_API_KEY", raising=False)
    monkeypatch.delenv("COINGECKO_API_KEY", raising=False)


@pytest.fixture
def config_files(tmp_path):
    ini_path = tmp_path / "config.ini"
    ini_path.write_text(INI, encoding="utf-8")
    keys_path = tmp_path / "keys.env"
    keys_path.write_text("GOOGLE_STUDIO_API_KEY=abc123\nCOINGECKO_API_KEY=\n", encoding="utf-8")
    return ini_path, keys_path


def test_reads_ini_values(config_files):
    ini_path, keys_path = config_files
    cfg = Config(config_path=ini_path, keys_path=keys_path)

    assert cfg.LOGGER_DEBUG is True
    assert cfg.DEFAULT_COIN == "ethereum"
    assert cfg.DEFAULT_CURRENCY == "eur"
    assert cfg.DEFAULT_RANGE_DAYS == 30
    assert cfg.COINGECKO_BASE_URL == "https://pro-api.coingecko.com/api/v3"
    assert cfg.REQUEST_TIMEOUT_SECONDS == 20.0
    assert cfg.RETRY_INITIAL_DELAY == 0.5
    assert cfg.GOOGLE_STUDIO_MODEL == "gemini-2.5-flash"


def test_negative_retry_count_is_clamped(config_files):
    ini_path, keys_path = config_files
    assert Config(config_path=ini_path, keys_path=keys_path).MAX_RETRIES == 0


def test_model_config_drops_unset_values(config_files):
    ini_path, keys_path = config_files
    cfg = Config(config_path=ini_path, keys_path=keys_path)
    assert cfg.get_model_config() == {"temperature": 0.2, "max_tokens": 512}
    assert cfg.get_model_config({"top_k": 10})["top_k"] == 10


def test_secrets_from_keys_env(config_files):
    ini_path, keys_path = config_files
    cfg = Config(config_path=ini_path, keys_path=keys_path)
    assert cfg.GOOGLE_STUDIO_API_KEY == "abc123"
    assert cfg.COINGECKO_API_KEY is None


@pytest.mark.parametrize("placeholder", ["YOUR_GEMINI_API_KEY_HERE", "your-api-key", "<api-key>", "  "])
def test_placeholder_secret_is_not_configured(tmp_path, placeholder):
    keys_path = tmp_path / "keys.env"
    keys_path.write_text(f"GOOGLE_STUDIO_API_KEY={placeholder}\n", encoding="utf-8")
    cfg = Config(config_path=tmp_path / "missing.ini", keys_path=keys_path)
    assert cfg.GOOGLE_STUDIO_API_KEY is None


def test_process_environment_fallback(tmp_path, monkeypatch):
    monkeypatch.setenv("GOOGLE_STUDIO_API_KEY", "from-env")
    cfg = Config(config_path=tmp_path / "missing.ini", keys_path=tmp_path / "missing.env")
    assert cfg.GOOGLE_STUDIO_API_KEY == "from-env"


def test_missing_files_use_defaults(tmp_path):
    cfg = Config(config_path=tmp_path / "missing.ini", keys_path=tmp_path / "missing.env")
    assert cfg.DEFAULT_COIN == "bitcoin"
    assert cfg.DEFAULT_CURRENCY == "usd"
    assert cfg.DEFAULT_RANGE_DAYS == 7
    assert cfg.REQUEST_TIMEOUT_SECONDS == 15.0
    assert cfg.MAX_RETRIES == 2
    assert cfg.GOOGLE_STUDIO_API_KEY is None
    assert cfg.LOG_DIR == "logs"
