"""
AI copy drafting service.
Sends the wireframe's HTML readout to an LLM and brings the drafted copy
back into the document as heading paragraphs.
"""

import re
import time
import logging
from typing import List
from dataclasses import dataclass

from openai import OpenAI, OpenAIError

from app.config import settings
from app.errors import PipewriterError, CopywriterUnavailableError, InvalidInputError
from app.models import ImportResult
from app.services.converter import import_from_html
from app.services.document import HostDocument
from app.services.wireframe import read_wireframe

logger = logging.getLogger(__name__)


@dataclass
class CopyDraft:
    """HTML lines drafted by the LLM, with timing info."""
    lines: List[str]
    llm_time_ms: int


SYSTEM_PROMPT = """You write website copy for wireframes.
You receive a wireframe as HTML, one element per line, and an instruction.

Tag meaning:
- <h1>, <h2>, <h3>: headlines, most to least prominent
- <button>: a feature name or call to action
- <label>: an eyebrow, a short kicker above a headline
- <p>: body text

Rewrite or extend the copy following the instruction.
RETURN ONLY HTML, one element per line, using only these tags:
<h1>, <h2>, <h3>, <h4> for a feature name or call to action,
<h5> for an eyebrow, and <p> for body text.
Never answer with <button> or <label>.
No markdown, no code fences, no explanations."""

CODE_FENCE_RE = re.compile(r'^```\w*$')


class LLMCopywriter:
    """Drafts wireframe copy with an OpenAI chat model."""

    def __init__(self, api_key: str = None, model: str = None):
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.client = OpenAI(api_key=self.api_key) if self.api_key else None
        self.model = model or settings.OPENAI_MODEL

    @property
    def available(self) -> bool:
        return self.client is not None

    def draft(self, wireframe_html: str, prompt: str) -> CopyDraft:
        """
        Ask the model for copy.

        Raises:
            CopywriterUnavailableError: No API key configured
            OpenAIError: The API call failed
        """
        if not self.client:
            raise CopywriterUnavailableError("OpenAI API key is not configured")

        llm_start = time.time()
        response = self.client.chat.completions.create(
            model=self.model,
            temperature=0.7,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": self._build_prompt(wireframe_html, prompt)},
            ],
        )
        llm_time_ms = int((time.time() - llm_start) * 1000)

        response_text = response.choices[0].message.content or ""
        logger.info("LLM response received in %dms: %s...", llm_time_ms, response_text[:200])
        return CopyDraft(lines=self._parse_response(response_text), llm_time_ms=llm_time_ms)

    def _build_prompt(self, wireframe_html: str, prompt: str) -> str:
        wireframe_html = wireframe_html.strip() or "(empty wireframe)"
        return f"""WIREFRAME:
{wireframe_html}

INSTRUCTION:
{prompt.strip()}"""

    def _parse_response(self, response_text: str) -> List[str]:
        """Keep the lines that start with a tag; drop fences and chatter."""
        lines = []
        for line in response_text.splitlines():
            line = line.strip()
            if not line or CODE_FENCE_RE.match(line):
                continue
            if line.startswith("<"):
                lines.append(line)
        return lines


def draft_copy(
    doc: HostDocument,
    prompt: str,
    copywriter: LLMCopywriter = None,
) -> ImportResult:
    """
    Draft copy for the wireframe and append it to the document.

    The wireframe is read as HTML, sent to the copywriter with the prompt,
    and the returned lines are imported as heading paragraphs.
    """
    start_time = time.time()
    copywriter = copywriter or LLMCopywriter()

    try:
        if not prompt or not prompt.strip():
            raise InvalidInputError("No prompt provided")

        readout = read_wireframe(doc)
        draft = copywriter.draft(readout.html, prompt)
        if not draft.lines:
            raise InvalidInputError("The model returned no HTML lines")

    except (PipewriterError, OpenAIError) as e:
        logger.error("Error in draft_copy: %s", e)
        return ImportResult(
            success=False,
            error=str(e),
            execution_time_ms=int((time.time() - start_time) * 1000),
        )

    result = import_from_html(doc, draft.lines)
    result.execution_time_ms = int((time.time() - start_time) * 1000)
    return result
