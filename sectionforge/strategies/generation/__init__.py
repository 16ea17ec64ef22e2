"""Section generation: provider fallback client, splitting and assembly."""

from sectionforge.strategies.generation.assembler import SectionAssembler
from sectionforge.strategies.generation.client import (
    GenerationOutcome,
    GenerationState,
    ResilientGenerationClient,
)
from sectionforge.strategies.generation.prompts import build_system_prompt, build_user_prompt
from sectionforge.strategies.generation.splitter import ResponseSplitter, SegmentationResult

__all__ = [
    "SectionAssembler",
    "GenerationOutcome",
    "GenerationState",
    "ResilientGenerationClient",
    "build_system_prompt",
    "build_user_prompt",
    "ResponseSplitter",
    "SegmentationResult",
]
