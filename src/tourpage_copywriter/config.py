# -*- coding: utf-8 -*-
"""
Centralized configuration for TourPage Copywriter.

This module provides the marketing/SEO parameters sent with every generation
request, the model connection settings, and the target language table.
"""

from dataclasses import dataclass
from typing import Literal, Optional


# Target language code -> display name used in export headers
LANGUAGE_OPTIONS: dict[str, str] = {
    "zh-TW": "繁體中文 (台灣)",
    "zh-CN": "简体中文 (中國)",
    "en-US": "English (美國)",
    "en": "English (通用)",
    "ja": "日本語 (日本)",
    "ko": "한국어 (韓國)",
    "de": "Deutsch (德國)",
    "fr": "Français (法國)",
    "it": "Italiano (義大利)",
    "th": "ภาษาไทย (泰國)",
    "vi": "Tiếng Việt (越南)",
}

DEFAULT_OUTPUT_FILENAME = "TourPage_AI_Output.csv"

Audience = Literal["B2C", "B2B"]
MarketingFocus = Literal["brand", "product", "usp"]
SeoMode = Literal["basic", "advanced"]
ContentLength = Literal["short", "medium", "long"]
Provider = Literal["gemini", "anthropic"]

AUDIENCES = ("B2C", "B2B")
MARKETING_FOCUSES = ("brand", "product", "usp")
SEO_MODES = ("basic", "advanced")
CONTENT_LENGTHS = ("short", "medium", "long")
PROVIDERS = ("gemini", "anthropic")

DEFAULT_MODELS: dict[str, str] = {
    "gemini": "gemini-2.0-flash-exp",
    "anthropic": "claude-sonnet-4-20250514",
}

# Environment variable holding the credential for each provider
API_KEY_ENV_VARS: dict[str, str] = {
    "gemini": "GEMINI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def is_chinese_language(language: str) -> bool:
    """Check if a target language code is a Chinese variant (zh-TW, zh-CN, ...)."""
    return language.strip().lower().startswith("zh")


def resolve_language_name(language: str) -> str:
    """Return the display name of a language code, or the code itself if unknown."""
    return LANGUAGE_OPTIONS.get(language, language)


@dataclass
class GenerationConfig:
    """
    Marketing and SEO parameters for one generation request.

    Attributes:
        audience: "B2C" for emotional, lifestyle copy or "B2B" for
            ROI-driven, solution-oriented copy.
        language: Target market language code (see LANGUAGE_OPTIONS).
            Non-Chinese targets also receive Chinese translations (_zh fields).
        focus: Marketing focus: "brand", "product" or "usp".
        keywords: Content that must be mentioned. Empty means none.

        industry_category: Industry used for competitor analysis.
        target_location: Geographic market for local SEO.
        business_type: Kind of business (used for structured data).
        competitor_urls: Optional competitor sites for gap analysis.
        seo_mode: "basic" for standard optimization, "advanced" for the full
            competitor/USP analysis.
        content_length: "short", "medium" or "long" copy.
    """

    audience: Audience = "B2C"
    language: str = "zh-TW"
    focus: MarketingFocus = "brand"
    keywords: str = ""

    # SEO extension parameters
    industry_category: str = ""
    target_location: str = ""
    business_type: str = ""
    competitor_urls: str = ""
    seo_mode: SeoMode = "basic"
    content_length: ContentLength = "medium"

    @property
    def is_chinese(self) -> bool:
        """Check if the target language is a Chinese variant."""
        return is_chinese_language(self.language)

    @property
    def language_name(self) -> str:
        """Display name of the target language."""
        return resolve_language_name(self.language)

    def prompt_parameters(self) -> dict[str, str]:
        """Parameters as shown to the model, with defaults for empty values."""
        return {
            "audience": self.audience,
            "language": self.language,
            "focus": self.focus,
            "keywords": self.keywords.strip() or "None",
            "industry_category": self.industry_category.strip() or "Unspecified",
            "target_location": self.target_location.strip() or "Global",
            "business_type": self.business_type.strip() or "General business",
            "competitor_urls": self.competitor_urls.strip(),
            "seo_mode": self.seo_mode,
            "content_length": self.content_length,
        }

    def __post_init__(self):
        """Validate configuration values."""
        if self.audience not in AUDIENCES:
            raise ValueError(f"audience must be 'B2C' or 'B2B', got '{self.audience}'")
        if self.focus not in MARKETING_FOCUSES:
            raise ValueError(
                f"focus must be 'brand', 'product', or 'usp', got '{self.focus}'"
            )
        if self.seo_mode not in SEO_MODES:
            raise ValueError(f"seo_mode must be 'basic' or 'advanced', got '{self.seo_mode}'")
        if self.content_length not in CONTENT_LENGTHS:
            raise ValueError(
                f"content_length must be 'short', 'medium', or 'long', "
                f"got '{self.content_length}'"
            )
        if not self.language.strip():
            raise ValueError("language must not be empty")

    @classmethod
    def advanced(cls, **overrides) -> "GenerationConfig":
        """Create config with the full SEO analysis enabled.

        Args:
            **overrides: Override any config values (e.g., language='en')

        Returns:
            GenerationConfig with advanced SEO mode and long-form content
        """
        defaults = {
            "seo_mode": "advanced",
            "content_length": "long",
        }
        defaults.update(overrides)
        return cls(**defaults)


@dataclass
class ModelSettings:
    """
    Connection settings for the external model.

    Attributes:
        provider: "gemini" (REST generateContent) or "anthropic" (Messages API).
        model: Model identifier. None selects the provider default.
        timeout: Request timeout in seconds, enforced by the HTTP client.
        max_tokens: Response token limit (Anthropic only; required by its API).
    """

    provider: Provider = "gemini"
    model: Optional[str] = None
    timeout: float = 120.0
    max_tokens: int = 8192

    @property
    def model_name(self) -> str:
        """Model identifier, falling back to the provider default."""
        return self.model or DEFAULT_MODELS[self.provider]

    def __post_init__(self):
        """Validate configuration values."""
        if self.provider not in PROVIDERS:
            raise ValueError(
                f"provider must be 'gemini' or 'anthropic', got '{self.provider}'"
            )
        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be >= 1, got {self.max_tokens}")
