"""HDL Generator — generate and explore orchestration over an injected model client.

Generate mode sends the deliverable prompt with the JSON response schema and
reassembles the reply into a map of deliverable id -> HdlFile. Explore mode
sends the fixed architecture-comparison prompt and wraps the free-form
Markdown reply as a single artifact.

Each submission makes exactly one model call. Failures surface as
UpstreamError, EmptyResponseError or MalformedResponseError.
"""

import logging

from rtlforge.deliverables import EXPLORATION_ID
from rtlforge.errors import EmptyResponseError, MalformedResponseError, UpstreamError
from rtlforge.llm import ModelClient
from rtlforge.prompts import build_exploration_prompt, build_prompt
from rtlforge.schema import build_response_schema
from rtlforge.state import GenerationRequest, GenerationResult
from rtlforge.utils.parsing import (
    clean_output,
    parse_json_object,
    strip_fences,
    validate_file_entries,
)

log = logging.getLogger(__name__)

EXPLORATION_FILENAME = "Architecture_Exploration.md"
EXPLORATION_LANGUAGE = "Markdown"

# Passed as thinking_budget when extended reasoning is off.
NO_THINKING = 0


def _thinking_budget(thinking_mode: bool) -> int | None:
    return None if thinking_mode else NO_THINKING


class HdlGenerator:
    def __init__(self, client: ModelClient):
        self.client = client

    def _call(self, prompt: str, thinking_mode: bool, response_schema: dict | None = None) -> str:
        try:
            return self.client.invoke(
                prompt,
                response_schema=response_schema,
                thinking_budget=_thinking_budget(thinking_mode),
            )
        except Exception as exc:
            log.error("Gemini API call failed: %r", exc)
            message = str(exc) or "An unknown error occurred with the AI service."
            raise UpstreamError(f"API Error: {message}") from exc

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Generate the requested deliverables for a design description."""
        prompt = build_prompt(
            request.description,
            request.hdl_language,
            request.deliverables,
            request.protocol,
            request.architecture,
            request.simulation_tool,
        )
        schema = build_response_schema(request.deliverables)

        raw = self._call(prompt, request.thinking_mode, response_schema=schema)
        content = strip_fences(raw or "")
        if not content:
            raise EmptyResponseError()

        try:
            data = parse_json_object(content)
            result = clean_output(data, request.deliverables)
            validate_file_entries(result)
        except ValueError as exc:
            log.error("Failed to parse response from AI: %s", exc)
            log.error("Received response: %s", raw)
            raise MalformedResponseError() from exc

        log.info(
            "Generated %d of %d requested deliverable(s): %s",
            len(result), len(request.deliverables), ", ".join(result) or "-",
        )
        return result

    def explore(self, description: str, thinking_mode: bool = False) -> GenerationResult:
        """Ask for competing microarchitectures and a trade-off comparison."""
        prompt = build_exploration_prompt(description)
        text = self._call(prompt, thinking_mode)
        if not text or not text.strip():
            raise EmptyResponseError()

        return {
            EXPLORATION_ID: {
                "filename": EXPLORATION_FILENAME,
                "language": EXPLORATION_LANGUAGE,
                "code": text,
            }
        }
