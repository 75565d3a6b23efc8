"""
Cache Proxy - Configuration Loader Tests
"""

from pathlib import Path

import pytest

from cacheproxy.config import LocalConfig, MemcachedConfig, RedisConfig, SecretCipher, load_service_config

_ENV_VARS = (
    "CACHE_BACKEND",
    "CACHE_STORE",
    "CACHE_HOST",
    "CACHE_PORT",
    "CACHE_PASSWORD",
    "CACHE_DATABASE_INDEX",
    "CACHE_OPTIONS",
    "CACHE_DEFAULT_TTL",
    "CACHE_ENCRYPTION_KEY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Start every test without cache variables and away from any real .env file."""
    for name in _ENV_VARS:
        # setenv first so monkeypatch restores the original state even if load_dotenv writes the variable
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


class TestLoadServiceConfig:
    def test_defaults_to_local(self) -> None:
        config = load_service_config()
        assert isinstance(config, LocalConfig)
        assert config.store is None
        assert config.default_ttl == 300

    def test_local_ignores_network_fields(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHE_STORE", "file")
        monkeypatch.setenv("CACHE_HOST", "10.0.0.5")
        config = load_service_config()
        assert isinstance(config, LocalConfig)
        assert config.store == "file"

    def test_memcached_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHE_BACKEND", "memcached")
        monkeypatch.setenv("CACHE_HOST", "10.0.0.5")
        monkeypatch.setenv("CACHE_OPTIONS", '{"weight": 50}')
        monkeypatch.setenv("CACHE_DEFAULT_TTL", "15")
        config = load_service_config()
        assert isinstance(config, MemcachedConfig)
        assert config.host == "10.0.0.5"
        assert config.options == {"weight": 50}
        assert config.default_ttl == 15

    def test_redis_with_encrypted_password(self, monkeypatch: pytest.MonkeyPatch) -> None:
        cipher = SecretCipher("env-key")
        monkeypatch.setenv("CACHE_BACKEND", "redis")
        monkeypatch.setenv("CACHE_PORT", "6380")
        monkeypatch.setenv("CACHE_DATABASE_INDEX", "2")
        monkeypatch.setenv("CACHE_PASSWORD", cipher.encrypt("hunter2"))
        monkeypatch.setenv("CACHE_ENCRYPTION_KEY", "env-key")
        config = load_service_config()
        assert isinstance(config, RedisConfig)
        assert config.port == 6380
        assert config.database_index == 2
        assert config.password is not None
        assert config.password.reveal() == "hunter2"

    def test_env_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / "cache.env"
        env_file.write_text("CACHE_BACKEND=memcached\nCACHE_HOST=mc.internal\n")
        config = load_service_config(env_file=str(env_file))
        assert isinstance(config, MemcachedConfig)
        assert config.host == "mc.internal"
