"""Server settings read from the environment when the module is imported.

Every section is a frozen dataclass whose defaults are pulled from environment
variables at construction time, so tests can build a fresh section under
``patch.dict(os.environ, ...)``.
"""

import os
import secrets
from dataclasses import dataclass, field
from typing import Literal

DifficultyName = Literal["easy", "normal", "hard"]

DIFFICULTY_NAMES: tuple[str, ...] = ("easy", "normal", "hard")


def _env_flag(name: str, default: bool) -> bool:
    """Only "true" (any case) switches a flag on."""
    return os.getenv(name, str(default)).strip().lower() == "true"


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_list(name: str, default: str) -> list[str]:
    """Split a comma separated variable, dropping blanks."""
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


def _parse_seed() -> int | None:
    """Parse GAME_SEED; unset or blank means a fresh random deal every game."""
    seed = os.getenv("GAME_SEED", "").strip()
    return int(seed) if seed else None


@dataclass(frozen=True)
class CORSConfig:
    """Browser origins allowed to call the game API."""

    allowed_origins: list[str] = field(
        default_factory=lambda: _env_list("CORS_ORIGINS", "http://localhost:8000")
    )
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["GET", "POST", "DELETE"])
    allow_headers: list[str] = field(default_factory=lambda: ["Content-Type", "X-Session-ID"])


@dataclass(frozen=True)
class RateLimitConfig:
    enabled: bool = field(default_factory=lambda: _env_flag("RATE_LIMIT_ENABLED", True))
    requests_per_minute: int = field(default_factory=lambda: _env_int("RATE_LIMIT_RPM", 60))

    @property
    def limit(self) -> str:
        """The limit in slowapi's notation."""
        return f"{self.requests_per_minute}/minute"


@dataclass(frozen=True)
class SecurityConfig:
    """Key used to sign session tokens; a random one per process if unset."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY") or secrets.token_urlsafe(32)
    )


@dataclass(frozen=True)
class RedisConfig:
    """
    Where session snapshots are stored.

    REDIS_URL wins when set; otherwise the URL is assembled from the
    REDIS_HOST / REDIS_PORT / REDIS_DB / REDIS_PASSWORD parts.
    """

    host: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: _env_int("REDIS_PORT", 6379))
    db: int = field(default_factory=lambda: _env_int("REDIS_DB", 0))
    password: str | None = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))
    explicit_url: str | None = field(default_factory=lambda: os.getenv("REDIS_URL"))

    @property
    def url(self) -> str:
        if self.explicit_url:
            return self.explicit_url
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


@dataclass(frozen=True)
class GameConfig:
    """Defaults for games dealt through the API."""

    default_difficulty: DifficultyName = field(
        default_factory=lambda: os.getenv("DEFAULT_DIFFICULTY", "normal").strip().lower()  # type: ignore[return-value]
    )
    seed: int | None = field(default_factory=_parse_seed)

    def __post_init__(self) -> None:
        if self.default_difficulty not in DIFFICULTY_NAMES:
            raise ValueError(f"Unknown DEFAULT_DIFFICULTY: {self.default_difficulty!r}")


@dataclass(frozen=True)
class LoggingConfig:
    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").strip().upper())
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class AppConfig:
    """Top-level settings for the Klondike server."""

    debug: bool = field(default_factory=lambda: _env_flag("DEBUG", False))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("PORT", 8000))
    # Lifetime of a session token and of its stored game, in seconds
    session_ttl: int = field(default_factory=lambda: _env_int("SESSION_TTL", 3600))

    redis: RedisConfig = field(default_factory=RedisConfig)
    game: GameConfig = field(default_factory=GameConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


config = AppConfig()
