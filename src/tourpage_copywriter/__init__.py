"""
TourPage Copywriter

An AI website copy generator that:
- Reads a client's content template (CSV/Excel) or a free-form description
- Generates target-language copy, SEO analysis and Schema.org data with an LLM
- Exports a bilingual CSV, either overlaid on the template or as a fresh layout
"""

__version__ = "1.0.0"
__author__ = "TourPage Team"

from .config import (
    DEFAULT_OUTPUT_FILENAME,
    LANGUAGE_OPTIONS,
    GenerationConfig,
    ModelSettings,
    is_chinese_language,
)

from .errors import (
    CopyGeneratorError,
    EmptyResultError,
    ExternalServiceError,
    GenerationInProgressError,
    MalformedModelOutputError,
    UnexpectedError,
)

# Tabular codec
from .tabular_reader import read_content_tree
from .tabular_writer import write_fresh, write_overlay
from .csv_io import (
    SpreadsheetLoadError,
    decode_csv_rows,
    decode_rows,
    encode_csv,
    load_rows,
)

# Model response recovery
from .json_recovery import recover_content_tree, recover_json

# Generation
from .prompts import PromptPair, build_template_prompts, build_text_prompts
from .model_client import (
    AnthropicClient,
    GeminiClient,
    ModelClient,
    create_model_client,
)
from .pipeline import (
    CopyGenerator,
    GenerationResult,
    GenerationStatus,
)

__all__ = [
    # Configuration
    "DEFAULT_OUTPUT_FILENAME",
    "LANGUAGE_OPTIONS",
    "GenerationConfig",
    "ModelSettings",
    "is_chinese_language",
    # Errors
    "CopyGeneratorError",
    "EmptyResultError",
    "ExternalServiceError",
    "GenerationInProgressError",
    "MalformedModelOutputError",
    "UnexpectedError",
    "SpreadsheetLoadError",
    # Tabular codec
    "read_content_tree",
    "write_fresh",
    "write_overlay",
    "decode_csv_rows",
    "decode_rows",
    "encode_csv",
    "load_rows",
    # Model response recovery
    "recover_content_tree",
    "recover_json",
    # Generation
    "PromptPair",
    "build_template_prompts",
    "build_text_prompts",
    "AnthropicClient",
    "GeminiClient",
    "ModelClient",
    "create_model_client",
    "CopyGenerator",
    "GenerationResult",
    "GenerationStatus",
]
