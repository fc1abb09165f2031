"""Digest generation through the OpenAI Responses API."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Mapping, Sequence

import requests

from .config import Config
from .models import Candidate

LOGGER = logging.getLogger(__name__)

FALLBACK_DIGEST = "(No news candidates could be retrieved)"
TEXT_CONTENT_TYPES = ("output_text", "text")

PROMPT_TEMPLATE = """
You are the editor-in-chief of "Tech News", a digest posted to Slack.
The readers are frontend engineers working mainly with React/Next.js who are also
interested in generative AI and in new business and product moves by IT companies.
Below are the tech news candidates from the last {hours} hours.

# Goal
Pick only the items that are genuinely worth reading and summarize them in a form
that can be posted to Slack as is.

# Priority (high to low)
1) Security / vulnerabilities (RSC, App Router, dependencies, supply chain)
2) Breaking changes / compatibility impact
3) New features and APIs that matter in production (React, Next.js, browsers, tooling)
4) Lasting design and architecture knowledge (reproducible lessons)
5) New businesses and product launches by IT companies (market and strategy signals)

# Scoring (10 points total)
- Impact (0-4): how broad the impact is
- Urgency (0-3): whether it needs checking or action right now
- Relevance (0-2): how directly it relates to React/Next.js, AI or new business, or helps with generative AI hacks
- Credibility (0-1): official, primary or otherwise trustworthy source

# Constraints
- Do not speculate. Do not write about news that is not in the candidates.
- Keep at most 5 items, ordered by score. Merge items about the same topic into one.
- At most 3 lines per item:
  1) What happened
  2) Impact / who is affected
  3) Action to take (read / act / wait and see)
- Every item must include its URL.
- Finish with "Today's actions" as a bullet list of at most 3 entries.

# Output format (always exactly this shape)
📰 Tech News | Today's highlights (top 5)
1) [score/10] Title — Source
   - What happened:
   - Impact:
   - Action:
   URL: ...

...(up to 5 items)

✅ Today's actions
- ...
- ...
- ...

# Candidates JSON
{candidates}
""".strip()


class SummarizerError(RuntimeError):
    """Raised when the summarization service call fails."""


def serialize_candidates(candidates: Iterable[Candidate]) -> str:
    return json.dumps([c.to_dict() for c in candidates], indent=2, ensure_ascii=False)


def build_prompt(candidates: Sequence[Candidate], lookback_hours: float) -> str:
    """Combine the curation rubric with the serialized candidate list."""

    hours = f"{lookback_hours:g}"
    return PROMPT_TEMPLATE.format(hours=hours, candidates=serialize_candidates(candidates))


def extract_text(payload: Mapping[str, Any]) -> str:
    """Concatenate every text fragment of a Responses API payload, in order."""

    parts: List[str] = []
    for output in payload.get("output") or []:
        if not isinstance(output, Mapping):
            continue
        for content in output.get("content") or []:
            if not isinstance(content, Mapping):
                continue
            if content.get("type") in TEXT_CONTENT_TYPES:
                parts.append(content.get("text") or "")
    return "".join(parts).strip()


def request_digest(session: requests.Session, config: Config, candidates: Sequence[Candidate]) -> str:
    """Return the digest text for ``candidates``.

    An empty candidate list short-circuits to FALLBACK_DIGEST without any
    network call. Any service failure raises SummarizerError.
    """

    if not candidates:
        LOGGER.info("No candidates; using fallback digest")
        return FALLBACK_DIGEST

    body = {"model": config.model, "input": build_prompt(candidates, config.lookback_hours)}
    headers = {"Authorization": f"Bearer {config.openai_api_key}"}
    LOGGER.info("Requesting digest for %d candidates from %s", len(candidates), config.model)
    try:
        response = session.post(config.openai_api_url, json=body, headers=headers, timeout=config.request_timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as exc:
        raise SummarizerError(f"Summarization request failed: {exc}") from exc
    except ValueError as exc:
        raise SummarizerError(f"Summarization response is not JSON: {exc}") from exc

    if not isinstance(payload, Mapping):
        raise SummarizerError("Summarization response is not a JSON object")
    text = extract_text(payload)
    LOGGER.debug("Digest text has %d characters", len(text))
    return text
