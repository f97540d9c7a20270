"""Application settings and configuration."""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

ENV_PATH = Path(__file__).resolve().parent / '.env'
load_dotenv(dotenv_path=ENV_PATH)


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


class Settings:
    """
    Lolalytics blocks clients that burst too hard, and its per-slice data
    is thin early in a patch. Defaults below are tuned for a desktop
    companion: a handful of lookups per champion select, cached for the
    whole game.
    """

    # ── Hosts ──────────────────────────────────────────────────────────────
    LOLALYTICS_BASE: str = os.getenv('LOLALYTICS_BASE', 'https://lolalytics.com')
    LOLALYTICS_API:  str = os.getenv('LOLALYTICS_API',  'https://a1.lolalytics.com')
    QUERY_PATH:      str = '/mega/'
    USER_AGENT:      str = os.getenv(
        'USER_AGENT',
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
        '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    )

    # ── Throttle (burst 3, then 1 token / 500 ms = 2 req/s) ────────────────
    THROTTLE_CAPACITY:  int = _env_int('THROTTLE_CAPACITY', 3)
    THROTTLE_REFILL_MS: int = _env_int('THROTTLE_REFILL_MS', 500)

    # ── HTTP ───────────────────────────────────────────────────────────────
    REQUEST_TIMEOUT:  int   = _env_int('REQUEST_TIMEOUT', 10)
    PAGE_TIMEOUT:     int   = _env_int('PAGE_TIMEOUT', 15)
    MAX_RETRIES:      int   = _env_int('MAX_RETRIES', 2)
    RETRY_BACKOFF_MS: int   = _env_int('RETRY_BACKOFF_MS', 1000)
    RETRY_FACTOR:     float = _env_float('RETRY_FACTOR', 2.0)

    # ── Cache ──────────────────────────────────────────────────────────────
    # Negative TTL must stay below the positive one: a slice that is empty
    # at patch day usually fills up within minutes.
    CACHE_TTL_S:          int = _env_int('CACHE_TTL_S', 30 * 60)
    NEGATIVE_CACHE_TTL_S: int = _env_int('NEGATIVE_CACHE_TTL_S', 5 * 60)

    # ── Sample thresholds ──────────────────────────────────────────────────
    MIN_MATCHUP_GAMES: int = _env_int('MIN_MATCHUP_GAMES', 50)
    MIN_SET_GAMES:     int = _env_int('MIN_SET_GAMES', 5)
    MIN_SLOT_GAMES:    int = _env_int('MIN_SLOT_GAMES', 3)
    MIN_SUMMARY_GAMES: int = _env_int('MIN_SUMMARY_GAMES', 20)

    # ── Query slice ────────────────────────────────────────────────────────
    TIER:           str           = os.getenv('LOLALYTICS_TIER', 'emerald_plus')
    QUEUE:          str           = os.getenv('LOLALYTICS_QUEUE', 'ranked')
    REGION:         str           = os.getenv('LOLALYTICS_REGION', 'all')
    TRAILING_PATCH: str           = '30'
    PATCH_OVERRIDE: Optional[str] = os.getenv('PATCH_OVERRIDE') or None

    # ── Channel circuit breaker ────────────────────────────────────────────
    BREAKER_THRESHOLD: int = _env_int('BREAKER_THRESHOLD', 5)
    BREAKER_RESET_S:   int = _env_int('BREAKER_RESET_S', 120)

    # ── Data Dragon ────────────────────────────────────────────────────────
    DD_BASE:             str = 'https://ddragon.leagueoflegends.com'
    DD_FALLBACK_VERSION: str = os.getenv('DD_FALLBACK_VERSION', '14.24.1')

    # ── Paths ──────────────────────────────────────────────────────────────
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    DATA_DIR: Path = BASE_DIR / 'data'
    LOG_DIR:  Path = DATA_DIR / 'logs'

    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def validate(cls) -> None:
        if cls.THROTTLE_CAPACITY <= 0 or cls.THROTTLE_REFILL_MS <= 0:
            raise ValueError("THROTTLE_CAPACITY and THROTTLE_REFILL_MS must be positive")
        if cls.NEGATIVE_CACHE_TTL_S >= cls.CACHE_TTL_S:
            raise ValueError("NEGATIVE_CACHE_TTL_S must be shorter than CACHE_TTL_S")
        if cls.MAX_RETRIES < 0:
            raise ValueError("MAX_RETRIES cannot be negative")

    @classmethod
    def create_directories(cls) -> None:
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
