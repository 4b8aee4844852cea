"""Radar configuration.

Built once at process entry with RadarConfig.from_env() and passed by
parameter into every component. Nothing below the entry points reads the
environment.
"""
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from radar.errors import ConfigError, StoreError
from radar.models import FeedSource

logger = logging.getLogger(__name__)


# --- Strategic RSS feeds (high-authority sources) -------------------------
DEFAULT_FEEDS = [
    # BPOM (recall & press releases)
    FeedSource(
        endpoint="https://news.google.com/rss/search?q=site:pom.go.id+intitle:%22siaran+pers%22&hl=id&gl=ID&ceid=ID:id",
        label="BPOM Siaran Pers",
    ),
    FeedSource(
        endpoint="https://news.google.com/rss/search?q=site:pom.go.id+intitle:%22penjelasan+publik%22&hl=id&gl=ID&ceid=ID:id",
        label="BPOM Penjelasan Publik",
    ),
    # Kemenkes (outbreaks & regulation)
    FeedSource(endpoint="https://kemkes.go.id/id/rss/article/rilis-berita", label="Kemenkes Rilis"),
    FeedSource(endpoint="https://pusatkrisis.kemkes.go.id/feed/rss.php?cat=eo", label="Kemenkes Krisis"),
    # Competitor watch
    FeedSource(
        endpoint="https://news.google.com/rss/search?q=%22Kimia+Farma%22+OR+%22Apotek+K24%22+OR+%22Guardian%22+OR+%22Watson%22+OR+%22Apotek+Roxy%22&hl=id&gl=ID&ceid=ID:id",
        label="Competitor Watch",
    ),
]

# --- Noise vs signal protocol ---------------------------------------------
NOISE_KEYWORDS = [
    "penghargaan", "csr", "ulang tahun", "seremonial", "mou",
    "kunjungan kerja", "lomba", "wisuda", "bakti sosial", "donor darah",
]

SIGNAL_KEYWORDS = [
    "tarik", "recall", "obat ilegal", "klb", "wabah", "izin edar",
    "kenaikan harga", "akuisisi", "cabang baru", "promo", "diskon",
    "outbreak", "pandemi", "darurat", "langka", "ditarik", "palsu",
    "merger", "ekspansi", "tutup", "bangkrut", "regulasi baru",
]

NOISE_BYPASS_LABELS = ["Competitor Watch"]

# Provider presets: (api key variable, default base url)
PROVIDERS = {
    "groq": ("GROQ_API_KEY", "https://api.groq.com/openai/v1"),
    "openai": ("OPENAI_API_KEY", None),
}

# Keys a `radar_settings` row may override
_OVERRIDABLE_INT_KEYS = ("batch_size", "max_age_days", "score_threshold")


class RadarConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Supabase
    supabase_url: str
    supabase_key: str

    # LLM
    llm_provider: str = "groq"
    llm_api_key: str = ""
    llm_model: str = "llama-3.3-70b-versatile"
    llm_base_url: Optional[str] = None
    news_temperature: float = 0.3
    review_temperature: float = 0.2
    max_tokens: int = Field(default=4096, gt=0)
    llm_timeout: float = Field(default=120.0, gt=0, allow_inf_nan=False)

    # Feeds & filters
    feeds: list[FeedSource] = DEFAULT_FEEDS
    noise_keywords: list[str] = NOISE_KEYWORDS
    signal_keywords: list[str] = SIGNAL_KEYWORDS
    noise_bypass_labels: list[str] = NOISE_BYPASS_LABELS
    max_age_days: int = Field(default=7, gt=0)
    batch_size: int = Field(default=100, gt=0)
    score_threshold: int = Field(default=7, ge=0, le=10)
    viral_threshold: int = Field(default=9, ge=0)
    fetch_timeout: float = Field(default=20.0, gt=0, allow_inf_nan=False)
    fetch_workers: int = Field(default=5, gt=0)

    # Reviews
    review_batch_limit: int = Field(default=50, gt=0)

    # Notifications
    notify: bool = False
    alert_receiver: str = "hendri@apotekalpro.id"
    alert_sender: str = '"Alpro Hub OASIS" <no-reply@apotekalpro.id>'
    dashboard_url: str = "http://localhost:5173"
    smtp_host: Optional[str] = None
    smtp_port: int = Field(default=587, gt=0, le=65535)
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_secure: bool = False
    outbox_dir: str = "output/emails"

    @classmethod
    def from_env(cls, require_llm: bool = True, env: Optional[dict] = None) -> "RadarConfig":
        """Build the config from environment variables (and `.env`).

        Args:
            require_llm: fail when the provider's API key is missing. Entry
                points that never classify (Z-STOP, connection check) pass False.
            env: mapping to read instead of os.environ (tests).

        Raises:
            ConfigError: a required variable is missing or malformed.
        """
        if env is None:
            load_dotenv()
            env = dict(os.environ)

        supabase_url = env.get("SUPABASE_URL", "").strip()
        supabase_key = env.get("SUPABASE_ANON_KEY", "").strip()
        if not supabase_url or not supabase_key:
            raise ConfigError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")

        provider = env.get("RADAR_LLM_PROVIDER", "groq").strip().lower()
        if provider not in PROVIDERS:
            raise ConfigError(f"Unknown RADAR_LLM_PROVIDER '{provider}' (expected one of {sorted(PROVIDERS)})")
        key_var, default_base_url = PROVIDERS[provider]
        api_key = env.get(key_var, "").strip()
        if require_llm and not api_key:
            raise ConfigError(f"{key_var} must be set for provider '{provider}'")

        values = {
            "supabase_url": supabase_url.rstrip("/"),
            "supabase_key": supabase_key,
            "llm_provider": provider,
            "llm_api_key": api_key,
            "llm_base_url": env.get("OPENAI_BASE_URL") if provider == "openai" else default_base_url,
            "notify": _env_bool(env.get("RADAR_NOTIFY")),
            "smtp_host": env.get("SMTP_HOST") or None,
            "smtp_user": env.get("SMTP_USER") or None,
            "smtp_password": env.get("SMTP_PASS") or None,
            "smtp_secure": _env_bool(env.get("SMTP_SECURE")),
        }
        if env.get("RADAR_MODEL"):
            values["llm_model"] = env["RADAR_MODEL"]
        if env.get("ALERT_RECEIVER_EMAIL"):
            values["alert_receiver"] = env["ALERT_RECEIVER_EMAIL"]

        for var, field in (
            ("SMTP_PORT", "smtp_port"),
            ("RADAR_BATCH_SIZE", "batch_size"),
            ("RADAR_MAX_AGE_DAYS", "max_age_days"),
            ("RADAR_SCORE_THRESHOLD", "score_threshold"),
            ("RADAR_FETCH_WORKERS", "fetch_workers"),
        ):
            raw = env.get(var)
            if raw:
                try:
                    values[field] = int(raw)
                except ValueError:
                    raise ConfigError(f"{var} must be an integer, got '{raw}'") from None

        if env.get("RADAR_LLM_TIMEOUT"):
            try:
                values["llm_timeout"] = float(env["RADAR_LLM_TIMEOUT"])
            except ValueError:
                raise ConfigError(f"RADAR_LLM_TIMEOUT must be a number, got '{env['RADAR_LLM_TIMEOUT']}'") from None

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from None


def _env_bool(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes", "on")


# --- Settings from Supabase -----------------------------------------------
def _valid_override(config: RadarConfig, key: str, value) -> bool:
    try:
        type(config).model_validate({**config.model_dump(), key: value})
    except ValidationError:
        return False
    return True


def apply_store_overrides(config: RadarConfig, store) -> RadarConfig:
    """Return a copy of `config` with overrides from `radar_settings` and
    active feeds from `radar_sources`. Load failures keep the defaults."""
    updates: dict = {}

    try:
        for row in store.select("radar_settings", columns="key,value"):
            k, v = row.get("key"), row.get("value")
            if k in _OVERRIDABLE_INT_KEYS:
                try:
                    value = int(v)
                except (TypeError, ValueError):
                    logger.warning("Ignoring non-integer setting %s=%r", k, v)
                    continue
                if not _valid_override(config, k, value):
                    logger.warning("Ignoring out-of-range setting %s=%r", k, v)
                    continue
                updates[k] = value
    except StoreError as e:
        logger.warning("Could not load settings: %s", e)

    try:
        rows = store.select("radar_sources", columns="url,label", filters=[("is_active", "eq", True)])
        feeds = [FeedSource(endpoint=r["url"], label=r.get("label") or r["url"]) for r in rows if r.get("url")]
        if feeds:
            updates["feeds"] = feeds
    except StoreError as e:
        logger.warning("Could not load feed sources: %s", e)

    if updates:
        logger.info("Applied store overrides: %s", sorted(updates))
        return config.model_copy(update=updates)
    return config
