"""
Copy generation pipeline.

Sequences the stages of one generation request:

    template rows -> read_content_tree -> prompts -> model -> recover_content_tree
    free text ------------------------^

and projects the result into export rows (overlay for template input, fresh
layout for text input). The model call is the only awaited step. A failure at
any stage aborts the request; the generator records one user-facing status
message and logs the diagnostic.
"""

import logging
from dataclasses import dataclass, field
from typing import Literal, Optional, Sequence

from .config import GenerationConfig
from .csv_io import encode_csv
from .errors import (
    CopyGeneratorError,
    EmptyResultError,
    ExternalServiceError,
    GenerationInProgressError,
    MalformedModelOutputError,
    UnexpectedError,
)
from .json_recovery import recover_content_tree
from .model_client import ModelClient
from .prompts import PromptPair, build_template_prompts, build_text_prompts
from .schema import ContentTree
from .tabular_reader import read_content_tree
from .tabular_writer import write_fresh, write_overlay

logger = logging.getLogger(__name__)

StatusType = Literal["idle", "loading", "error", "success"]


@dataclass
class GenerationStatus:
    """User-facing state of the generator."""
    state: StatusType = "idle"
    message: str = ""


@dataclass
class GenerationResult:
    """Content generated for one request, with the template it came from."""
    tree: ContentTree
    config: GenerationConfig
    original_rows: Optional[list[list[str]]] = None
    raw_response: str = field(default="", repr=False)

    @property
    def from_template(self) -> bool:
        return self.original_rows is not None


def describe_error(error: Exception) -> str:
    """Turn a pipeline error into a single user-facing message."""
    if isinstance(error, EmptyResultError):
        return f"Input error: {error}"
    if isinstance(error, MalformedModelOutputError):
        return f"AI generation failed: {error} Check the debug log for the raw response."
    if isinstance(error, ExternalServiceError):
        return f"AI generation failed: {error}"
    if isinstance(error, GenerationInProgressError):
        return str(error)
    return f"Unexpected error: {error}"


class CopyGenerator:
    """
    Orchestrates template parsing, generation and export for one user.

    At most one generation runs at a time; starting another while one is in
    flight raises GenerationInProgressError.
    """

    def __init__(self, client: ModelClient, config: Optional[GenerationConfig] = None):
        self.client = client
        self.config = config or GenerationConfig()
        self.status = GenerationStatus()
        self.is_busy = False

    def _update_status(self, message: str, state: StatusType = "loading") -> None:
        self.status = GenerationStatus(state, message)
        logger.info(f"[{state}] {message}")

    async def generate_from_rows(self, rows: Sequence[Sequence[Optional[str]]]) -> GenerationResult:
        """
        Generate copy from content template rows.

        Raises:
            EmptyResultError: If the rows contain no recognized section.
            ExternalServiceError: If the model endpoint fails.
            MalformedModelOutputError: If the response cannot be recovered.
            UnexpectedError: For any other failure.
        """
        self._acquire()
        try:
            self._update_status("Parsing spreadsheet...")
            original_rows = [["" if c is None else str(c) for c in row] for row in rows]
            tree = read_content_tree(original_rows)
            self._update_status("Spreadsheet parsed, calling the AI model...")
            prompts = build_template_prompts(tree, self.config)
            return await self._generate(prompts, original_rows)
        except Exception as e:
            raise self._fail(e)
        finally:
            self.is_busy = False

    async def generate_from_text(self, text: str, website_url: Optional[str] = None) -> GenerationResult:
        """
        Generate copy from a free-form company/product description.

        Raises:
            EmptyResultError: If both text and website URL are empty.
            ExternalServiceError: If the model endpoint fails.
            MalformedModelOutputError: If the response cannot be recovered.
            UnexpectedError: For any other failure.
        """
        self._acquire()
        try:
            if not text.strip() and not (website_url or "").strip():
                raise EmptyResultError("Enter a company/product description or a website URL.")
            self._update_status("Calling the AI model...")
            prompts = build_text_prompts(text, self.config, website_url=website_url)
            return await self._generate(prompts, None)
        except Exception as e:
            raise self._fail(e)
        finally:
            self.is_busy = False

    def export_rows(self, result: GenerationResult) -> list[list[str]]:
        """Project a result into export rows: overlay for templates, fresh otherwise."""
        language = result.config.language
        if result.from_template:
            return write_overlay(result.original_rows, result.tree, language)
        return write_fresh(result.tree, language)

    def export_csv(self, result: GenerationResult) -> bytes:
        """Export a result as CSV bytes with a UTF-8 byte-order mark."""
        self._update_status("Building CSV file...")
        try:
            data = encode_csv(self.export_rows(result))
        except Exception as e:
            raise self._fail(e)
        self._update_status("CSV file ready.", "success")
        return data

    async def _generate(self, prompts: PromptPair, original_rows: Optional[list[list[str]]]) -> GenerationResult:
        raw = await self.client.generate(prompts)
        logger.debug(f"Raw model response ({len(raw)} chars): {raw}")
        tree = recover_content_tree(raw)
        self._update_status("AI copy generated. You can now download the output file.", "success")
        return GenerationResult(tree=tree, config=self.config, original_rows=original_rows, raw_response=raw)

    def _acquire(self) -> None:
        if self.is_busy:
            raise GenerationInProgressError("A generation is already in progress.")
        self.is_busy = True

    def _fail(self, error: Exception) -> CopyGeneratorError:
        """Record the failure and return the error to raise."""
        if not isinstance(error, CopyGeneratorError):
            logger.exception("Copy generation failed")
            error = UnexpectedError(str(error) or type(error).__name__)
        else:
            logger.error(f"Copy generation failed: {type(error).__name__}: {error}")
        self._update_status(describe_error(error), "error")
        return error
