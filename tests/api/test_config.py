"""Tests for environment-driven configuration."""

import os
from unittest.mock import patch

import pytest

from api.routes import game as game_routes
from config import (
    AppConfig,
    CORSConfig,
    GameConfig,
    LoggingConfig,
    RateLimitConfig,
    RedisConfig,
    SecurityConfig,
)


class TestCORSConfig:
    def test_default_origin_is_local_server(self):
        with patch.dict(os.environ, {}, clear=True):
            assert CORSConfig().allowed_origins == ["http://localhost:8000"]

    def test_origins_split_and_trimmed(self):
        with patch.dict(os.environ, {"CORS_ORIGINS": " http://cards.test , ,http://localhost:3000 "}):
            assert CORSConfig().allowed_origins == ["http://cards.test", "http://localhost:3000"]

    def test_session_header_is_allowed(self):
        """Browsers must be allowed to send the session token header."""
        cors = CORSConfig()
        assert "X-Session-ID" in cors.allow_headers
        assert {"GET", "POST", "DELETE"} <= set(cors.allow_methods)


class TestRateLimitConfig:
    def test_limit_notation(self):
        with patch.dict(os.environ, {"RATE_LIMIT_RPM": "15"}):
            assert RateLimitConfig().limit == "15/minute"

    @pytest.mark.parametrize("value, expected", [("TRUE", True), ("false", False), ("0", False), ("no", False)])
    def test_enabled_flag(self, value, expected):
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": value}):
            assert RateLimitConfig().enabled is expected


class TestSecurityConfig:
    def test_secret_from_env(self):
        with patch.dict(os.environ, {"SECRET_KEY": "klondike-secret"}):
            assert SecurityConfig().secret_key == "klondike-secret"

    def test_blank_secret_is_replaced(self):
        with patch.dict(os.environ, {"SECRET_KEY": ""}):
            assert len(SecurityConfig().secret_key) >= 32


class TestRedisConfig:
    def test_url_from_parts(self):
        env = {"REDIS_HOST": "cache", "REDIS_PORT": "6380", "REDIS_DB": "2", "REDIS_PASSWORD": "pw"}
        with patch.dict(os.environ, env, clear=True):
            assert RedisConfig().url == "redis://:pw@cache:6380/2"

    def test_explicit_url_wins(self):
        env = {"REDIS_URL": "redis://sessions.internal:6379/5", "REDIS_HOST": "ignored"}
        with patch.dict(os.environ, env, clear=True):
            assert RedisConfig().url == "redis://sessions.internal:6379/5"


class TestGameConfig:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            game = GameConfig()
            assert game.default_difficulty == "normal"
            assert game.seed is None

    def test_from_env(self):
        with patch.dict(os.environ, {"DEFAULT_DIFFICULTY": " Hard ", "GAME_SEED": "1234"}):
            game = GameConfig()
            assert game.default_difficulty == "hard"
            assert game.seed == 1234

    def test_blank_seed_means_random(self):
        with patch.dict(os.environ, {"GAME_SEED": "  "}):
            assert GameConfig().seed is None

    def test_unknown_difficulty_rejected(self):
        with patch.dict(os.environ, {"DEFAULT_DIFFICULTY": "expert"}):
            with pytest.raises(ValueError):
                GameConfig()


class TestLoggingConfig:
    def test_default_level(self):
        with patch.dict(os.environ, {}, clear=True):
            assert LoggingConfig().level == "INFO"

    def test_level_normalized(self):
        with patch.dict(os.environ, {"LOG_LEVEL": " debug"}):
            assert LoggingConfig().level == "DEBUG"


class TestAppConfig:
    def test_session_ttl_from_env(self):
        with patch.dict(os.environ, {"SESSION_TTL": "600"}):
            assert AppConfig().session_ttl == 600

    def test_debug_flag(self):
        with patch.dict(os.environ, {"DEBUG": "True"}):
            assert AppConfig().debug is True


class TestGameDefaultsOverHttp:
    """GAME_SEED and DEFAULT_DIFFICULTY as seen through POST /new."""

    @pytest.fixture
    def seeded_config(self, monkeypatch):
        with patch.dict(os.environ, {"DEFAULT_DIFFICULTY": "easy", "GAME_SEED": "7"}):
            app_config = AppConfig()
        monkeypatch.setattr(game_routes, "config", app_config)
        return app_config

    @pytest.mark.asyncio
    async def test_default_difficulty_applies_without_body(self, client, seeded_config):
        session_id = (await client.post("/api/game/new")).json()["session_id"]

        state = (await client.get("/api/game/state", headers={"X-Session-ID": session_id})).json()
        assert state["difficulty"]["name"] == "easy"
        assert state["difficulty"]["cards_drawn"] == 1

    @pytest.mark.asyncio
    async def test_request_overrides_default_difficulty(self, client, seeded_config):
        session_id = (await client.post("/api/game/new", json={"difficulty": "hard"})).json()["session_id"]
        assert game_routes._games[session_id].difficulty.name == "hard"

    @pytest.mark.asyncio
    async def test_seed_gives_identical_deals(self, client, seeded_config):
        first = (await client.post("/api/game/new")).json()["session_id"]
        second = (await client.post("/api/game/new")).json()["session_id"]

        assert first != second
        assert game_routes._games[first].get_state() == game_routes._games[second].get_state()
