"""Per-turn chat orchestration: fast path, dual search, assembly, generation."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum

from openai import AsyncOpenAI

from .config import config
from .context import ContextAssembler
from .exceptions import GenerationUnavailable
from .models import (
    ContextBundle,
    DocumentSearchOutcome,
    InformationQuality,
    WebSearchOutcome,
)
from .personas import Persona, get_persona
from .pipeline import RAGPipeline
from .web_search import WebSearchAdapter

logger = config.get_logger(__name__)

EXCERPT_LENGTH = 300


class TurnState(str, Enum):
    FAST_PATH = "fast_path"
    SEARCHING = "searching"
    ASSEMBLING = "assembling"
    GENERATING = "generating"
    DONE = "done"
    FAILED = "failed"


@dataclass
class TurnOutcome:
    """Reply for one chat turn plus diagnostics about how it was produced."""

    reply: str
    state: TurnState
    persona: str
    information_quality: InformationQuality | None = None
    has_strong_match: bool = False
    timings: dict[str, float] = field(default_factory=dict)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class ConversationManager:
    """Answers chat turns by combining document search and web search."""

    def __init__(
        self,
        rag_pipeline: RAGPipeline,
        web_search: WebSearchAdapter | None = None,
        openai_api_key: str | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize ConversationManager.

        Args:
            rag_pipeline: Document search pipeline.
            web_search: Web search adapter. If None, built from config.
            openai_api_key: OpenAI API key for the chat client.
            client: Pre-built async chat client, mainly for tests.
        """
        self.rag_pipeline = rag_pipeline
        self.web_search = web_search or WebSearchAdapter()
        if client is None:
            default_headers = config.get_api_headers()
            client = AsyncOpenAI(
                api_key=openai_api_key or config.get_openai_api_key(),
                base_url=config.OPENAI_BASE_URL,
                default_headers=default_headers or None,
                timeout=config.CHAT_TIMEOUT,
            )
        self.client = client

    async def generate_response(self, persona_id: str | None, message: str) -> str:
        """Chat turn interface: always returns reply text, never raises."""
        outcome = await self.run_turn(persona_id, message)
        return outcome.reply

    async def run_turn(self, persona_id: str | None, message: str) -> TurnOutcome:
        """Answer one chat message.

        Returns:
            TurnOutcome with the reply, final state and stage timings.
        """
        start = time.perf_counter()
        persona = get_persona(persona_id)
        logger.info("%s processing: %r", persona.display_name, message)

        if persona.is_fast_path(message):
            logger.info("Fast path: simple greeting or short message")
            return TurnOutcome(
                reply=persona.greeting,
                state=TurnState.FAST_PATH,
                persona=persona.key,
                timings={"total_ms": _elapsed_ms(start)},
            )

        search_start = time.perf_counter()
        document_outcome, web_outcome = await self._gather_evidence(persona, message)
        search_ms = _elapsed_ms(search_start)
        logger.info("Search completed in %.0fms", search_ms)

        assembler = ContextAssembler(
            document_label=persona.document_label, web_label=persona.web_label
        )
        bundle = assembler.assemble(document_outcome, web_outcome)

        generation_start = time.perf_counter()
        reply, state = await self._generate(persona, message, bundle)
        generation_ms = _elapsed_ms(generation_start)
        total_ms = _elapsed_ms(start)
        logger.info(
            "Generation: %.0fms, total: %.0fms, state: %s",
            generation_ms,
            total_ms,
            state.value,
        )

        return TurnOutcome(
            reply=reply,
            state=state,
            persona=persona.key,
            information_quality=bundle.information_quality,
            has_strong_match=bundle.has_strong_match,
            timings={
                "search_ms": search_ms,
                "generation_ms": generation_ms,
                "total_ms": total_ms,
            },
        )

    async def _gather_evidence(
        self, persona: Persona, message: str
    ) -> tuple[DocumentSearchOutcome, WebSearchOutcome]:
        """Run both search branches concurrently, isolating their failures.

        Returns:
            Document and web outcomes; a failed branch yields an empty one.
        """
        document_branch, web_branch = await asyncio.gather(
            self.rag_pipeline.search_with_scoring(message),
            self.web_search.search(persona.web_query(message)),
            return_exceptions=True,
        )

        if isinstance(document_branch, BaseException):
            logger.error("Document search failed: %r", document_branch)
            document_branch = DocumentSearchOutcome()
        if isinstance(web_branch, BaseException):
            logger.error("Web search failed: %r", web_branch)
            web_branch = WebSearchOutcome()

        return document_branch, web_branch

    async def _generate(
        self, persona: Persona, message: str, bundle: ContextBundle
    ) -> tuple[str, TurnState]:
        system_prompt = persona.build_system_prompt(
            bundle.information_quality.value.upper(), bundle.combined_context
        )

        try:
            content = await self._complete(persona, system_prompt, message)
        except GenerationUnavailable:
            logger.exception("%s generation failed", persona.display_name)
            return persona.apology, TurnState.FAILED

        if content and content.strip():
            return content, TurnState.DONE

        logger.warning("Generation returned empty content; using fallback")
        if bundle.document_context:
            excerpt = bundle.document_context[:EXCERPT_LENGTH]
            return f"{excerpt}... {persona.excerpt_suffix}", TurnState.DONE
        return persona.processing_reply, TurnState.DONE

    async def _complete(
        self, persona: Persona, system_prompt: str, message: str
    ) -> str | None:
        """Issue the single chat completion request for a turn.

        Raises:
            GenerationUnavailable: If the provider call fails or the response
                has no choices.
        """
        try:
            response = await self.client.chat.completions.create(
                model=config.CHAT_MODEL,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": message},
                ],
                max_tokens=persona.max_tokens,
                temperature=persona.temperature,
                stream=False,
            )
            return response.choices[0].message.content
        except Exception as exc:
            msg = f"Chat completion failed: {exc}"
            raise GenerationUnavailable(msg) from exc
