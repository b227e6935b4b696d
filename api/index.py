"""
FastAPI wrapper for TourPage Copywriter - Vercel Serverless Function.

This module exposes copy generation as a REST API: upload a content template
or send a description, download the generated CSV.
"""

import io
import logging
import os
from typing import Optional

from fastapi import FastAPI, File, Form, Header, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tourpage_copywriter import __version__
from tourpage_copywriter.config import (
    API_KEY_ENV_VARS,
    DEFAULT_OUTPUT_FILENAME,
    LANGUAGE_OPTIONS,
    GenerationConfig,
    ModelSettings,
)
from tourpage_copywriter.csv_io import SpreadsheetLoadError, decode_rows
from tourpage_copywriter.errors import (
    CopyGeneratorError,
    EmptyResultError,
    ExternalServiceError,
    GenerationInProgressError,
    MalformedModelOutputError,
)
from tourpage_copywriter.model_client import create_model_client
from tourpage_copywriter.pipeline import CopyGenerator, describe_error

logger = logging.getLogger(__name__)

app = FastAPI(
    title="TourPage Copywriter API",
    description="AI website copy generation with SEO analysis, exported as bilingual CSV",
    version=__version__,
)

# Enable CORS for all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Single-user tool: one generation at a time per process
_generation_active = False


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


class LanguageOption(BaseModel):
    """Target language choice."""
    code: str
    name: str


def _status_for(error: CopyGeneratorError) -> int:
    """Map a pipeline error to an HTTP status code."""
    if isinstance(error, EmptyResultError):
        return 400
    if isinstance(error, GenerationInProgressError):
        return 409
    if isinstance(error, (ExternalServiceError, MalformedModelOutputError)):
        return 502
    return 500


def _resolve_api_key(provider: str, header_key: Optional[str]) -> str:
    api_key = header_key or os.environ.get(API_KEY_ENV_VARS[provider])
    if not api_key:
        raise HTTPException(
            status_code=400,
            detail=f"Missing API key: send X-API-Key or set {API_KEY_ENV_VARS[provider]}",
        )
    return api_key


def _build_settings(
    provider: str,
    model: Optional[str],
    audience: str,
    language: str,
    focus: str,
    keywords: str,
    industry_category: str,
    target_location: str,
    business_type: str,
    competitor_urls: str,
    seo_mode: str,
    content_length: str,
) -> tuple[GenerationConfig, ModelSettings]:
    try:
        config = GenerationConfig(
            audience=audience,
            language=language,
            focus=focus,
            keywords=keywords,
            industry_category=industry_category,
            target_location=target_location,
            business_type=business_type,
            competitor_urls=competitor_urls,
            seo_mode=seo_mode,
            content_length=content_length,
        )
        settings = ModelSettings(provider=provider, model=model or None)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return config, settings


async def _run_generation(
    api_key: str,
    settings: ModelSettings,
    config: GenerationConfig,
    rows: Optional[list[list[str]]] = None,
    text: str = "",
    website_url: Optional[str] = None,
) -> StreamingResponse:
    """Run one generation and stream the CSV export, mapping errors to HTTP codes."""
    global _generation_active
    if _generation_active:
        error = GenerationInProgressError("A generation is already in progress.")
        raise HTTPException(status_code=409, detail=describe_error(error))

    _generation_active = True
    try:
        async with create_model_client(api_key, settings) as client:
            generator = CopyGenerator(client, config)
            if rows is not None:
                result = await generator.generate_from_rows(rows)
            else:
                result = await generator.generate_from_text(text, website_url=website_url)
            data = generator.export_csv(result)
    except CopyGeneratorError as e:
        raise HTTPException(status_code=_status_for(e), detail=describe_error(e))
    finally:
        _generation_active = False

    return StreamingResponse(
        io.BytesIO(data),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{DEFAULT_OUTPUT_FILENAME}"'},
    )


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@app.get("/api/languages", response_model=list[LanguageOption])
async def list_languages():
    """Target languages available for generation."""
    return [LanguageOption(code=code, name=name) for code, name in LANGUAGE_OPTIONS.items()]


@app.post("/api/generate/template")
async def generate_from_template(
    file: UploadFile = File(..., description="Content template (CSV or Excel)"),
    sheet_name: Optional[str] = Form(None, description="Excel sheet to read (default: first sheet)"),
    provider: str = Form("gemini"),
    model: Optional[str] = Form(None),
    audience: str = Form("B2C"),
    language: str = Form("zh-TW"),
    focus: str = Form("brand"),
    keywords: str = Form(""),
    industry_category: str = Form(""),
    target_location: str = Form(""),
    business_type: str = Form(""),
    competitor_urls: str = Form(""),
    seo_mode: str = Form("basic"),
    content_length: str = Form("medium"),
    x_api_key: Optional[str] = Header(None),
):
    """
    Generate copy from an uploaded content template.

    The response is the template with generated copy (and Chinese
    translations for non-Chinese targets) written beside the original text.
    """
    config, settings = _build_settings(
        provider, model, audience, language, focus, keywords,
        industry_category, target_location, business_type, competitor_urls,
        seo_mode, content_length,
    )
    api_key = _resolve_api_key(settings.provider, x_api_key)

    try:
        rows = decode_rows(await file.read(), file.filename or "", sheet_name)
    except SpreadsheetLoadError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Template upload {file.filename}: {len(rows)} rows")
    return await _run_generation(api_key, settings, config, rows=rows)


@app.post("/api/generate/text")
async def generate_from_text(
    text: str = Form("", description="Company/product description"),
    website_url: Optional[str] = Form(None, description="Company website URL"),
    provider: str = Form("gemini"),
    model: Optional[str] = Form(None),
    audience: str = Form("B2C"),
    language: str = Form("zh-TW"),
    focus: str = Form("brand"),
    keywords: str = Form(""),
    industry_category: str = Form(""),
    target_location: str = Form(""),
    business_type: str = Form(""),
    competitor_urls: str = Form(""),
    seo_mode: str = Form("basic"),
    content_length: str = Form("medium"),
    x_api_key: Optional[str] = Header(None),
):
    """
    Generate copy from a free-form description.

    The response is a fresh CSV with every content, SEO and structured-data block.
    """
    config, settings = _build_settings(
        provider, model, audience, language, focus, keywords,
        industry_category, target_location, business_type, competitor_urls,
        seo_mode, content_length,
    )
    api_key = _resolve_api_key(settings.provider, x_api_key)
    return await _run_generation(api_key, settings, config, text=text, website_url=website_url)


@app.get("/api/info")
async def api_info():
    """Get API information and usage instructions."""
    return {
        "name": "TourPage Copywriter API",
        "version": __version__,
        "description": "AI website copy generation with SEO analysis",
        "endpoints": {
            "GET /api/health": "Health check",
            "GET /api/languages": "Available target languages",
            "POST /api/generate/template": "Generate copy from an uploaded CSV/Excel template (returns CSV)",
            "POST /api/generate/text": "Generate copy from a description (returns CSV)",
            "GET /api/info": "This endpoint",
        },
        "documentation": "/docs",
        "openapi": "/openapi.json",
    }
