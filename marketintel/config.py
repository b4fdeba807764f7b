"""Application configuration via Pydantic Settings."""

from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class BusinessConfig(BaseModel):
    """A business being monitored."""

    name: str
    type: str
    enabled: bool = True
    etsy_shop: str = ""
    niches: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    competitors: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)


def _default_businesses() -> Dict[str, BusinessConfig]:
    return {
        "asobo": BusinessConfig(
            name="Asobo Creations",
            type="coloring-books",
            etsy_shop="asobocreations",
            niches=[
                "kawaii coloring pages",
                "cute animal coloring",
                "fantasy coloring book",
                "anime coloring pages",
                "whimsical art",
            ],
            competitors=["Mythographic", "ColoringBookCafe", "JadeSummerOfficial"],
        ),
        "peptides": BusinessConfig(
            name="Peptide Ventures",
            type="supplements",
            keywords=[
                "peptide therapy",
                "BPC-157",
                "TB-500",
                "anti-aging supplements",
                "biohacking",
            ],
            sources=["reddit.com/r/Peptides", "reddit.com/r/biohackers"],
        ),
    }


class PinterestSource(BaseModel):
    enabled: bool = True
    search_trends: bool = True
    trending_boards: List[str] = Field(
        default_factory=lambda: [
            "coloring pages",
            "adult coloring",
            "kawaii art",
            "digital art trends",
        ]
    )


class EtsySource(BaseModel):
    enabled: bool = True
    search_trends: bool = True
    track_competitors: bool = True
    product_limit: int = 10
    categories: List[str] = Field(
        default_factory=lambda: [
            "coloring book",
            "digital download coloring",
            "printable coloring pages",
        ]
    )


class SourcesConfig(BaseModel):
    pinterest: PinterestSource = Field(default_factory=PinterestSource)
    etsy: EtsySource = Field(default_factory=EtsySource)


class KeywordVocabulary(BaseModel):
    """Fixed vocabularies used for trend tagging. Order is the report order."""

    styles: List[str] = Field(
        default_factory=lambda: ["kawaii", "anime", "whimsical", "vintage", "minimalist", "boho"]
    )
    colors: List[str] = Field(
        default_factory=lambda: ["pastel", "vibrant", "monochrome", "earthy", "neon"]
    )
    themes: List[str] = Field(
        default_factory=lambda: ["animals", "fantasy", "nature", "mandalas", "flowers"]
    )


class PricingRules(BaseModel):
    """Mean-price thresholds for the pricing recommendation."""

    low_threshold: float = 5.0
    high_threshold: float = 15.0

    @model_validator(mode="after")
    def check_order(self) -> "PricingRules":
        if self.low_threshold > self.high_threshold:
            raise ValueError("low_threshold must not exceed high_threshold")
        return self


class ReportConfig(BaseModel):
    format: str = "markdown"
    sections: List[str] = Field(
        default_factory=lambda: [
            "executive-summary",
            "trending-topics",
            "competitor-activity",
            "opportunity-alerts",
            "action-items",
        ]
    )
    max_trends: int = 10
    max_competitors: int = 5


class Settings(BaseSettings):
    """Settings for one collector process, loaded from environment variables.

    Built once at process start (see ``get_settings``) and passed into every
    component that needs it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Run label shown in the report header and summary
    MODE: str = "test"

    # GitHub publishing
    GITHUB_ENABLED: bool = False
    GITHUB_OWNER: str = ""
    GITHUB_REPO: str = "earth-business-intel"
    GITHUB_BRANCH: str = "main"
    GITHUB_REPORTS_PATH: str = "reports/daily"

    # Working tree the reports are written into (and committed from)
    REPO_ROOT: Path = Field(default_factory=Path.cwd)

    # HTTP
    REQUEST_DELAY_SECONDS: float = 2.0  # be nice to websites
    REQUEST_TIMEOUT_SECONDS: float = 10.0
    USER_AGENT: str = DEFAULT_USER_AGENT

    # Push attempts before falling back to a local save
    MAX_RETRIES: int = 3

    LOG_LEVEL: str = "INFO"

    # Daily run time for --schedule (crontab syntax, UTC)
    SCHEDULE_CRON: str = "0 6 * * *"

    businesses: Dict[str, BusinessConfig] = Field(default_factory=_default_businesses)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    keywords: KeywordVocabulary = Field(default_factory=KeywordVocabulary)
    pricing: PricingRules = Field(default_factory=PricingRules)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @model_validator(mode="after")
    def normalize_mode(self) -> "Settings":
        self.MODE = self.MODE.strip().lower()
        if self.MODE not in ("test", "production"):
            raise ValueError(f"MODE must be 'test' or 'production', got {self.MODE!r}")
        return self

    @property
    def reports_dir(self) -> Path:
        """Local-only fallback directory."""
        return self.REPO_ROOT / "reports"

    @property
    def logs_dir(self) -> Path:
        return self.REPO_ROOT / "logs"

    @property
    def github_reports_dir(self) -> Path:
        return self.REPO_ROOT / self.GITHUB_REPORTS_PATH

    @property
    def github_repo_url(self) -> str:
        return f"https://github.com/{self.GITHUB_OWNER}/{self.GITHUB_REPO}"

    def commit_message(self, day: str) -> str:
        return f"Daily Intel Report - {day}"

    def competitor_shops(self) -> List[str]:
        """Competitor shop ids across enabled businesses, in config order."""
        shops: List[str] = []
        for business in self.businesses.values():
            if not business.enabled:
                continue
            for shop in business.competitors:
                if shop not in shops:
                    shops.append(shop)
        return shops


def get_settings(**overrides) -> Settings:
    """Build the process-wide settings value.

    Keyword overrides win over environment variables and ``.env``.
    """
    return Settings(**overrides)
