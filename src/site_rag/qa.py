from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence

from openai import APIError, APIStatusError, AsyncOpenAI

from .embeddings import Embedder, build_openai_client
from .errors import CompletionError, InvalidQueryError
from .retrieval import DEFAULT_TOP_K, HelpDocument, retrieve
from .schema import ChatReply, Document, ScoredHit, SourceRef
from .settings import AISettings
from .tracing import get_tracer, traced_generation, traced_retrieval

logger = logging.getLogger(__name__)

Completer = Callable[[list[dict]], Awaitable[str]]

FALLBACK_REPLY = (
    "I can help you with {product}! Ask me anything about the app, "
    "connection issues, features, or troubleshooting."
)


def build_context(hits: Sequence[ScoredHit]) -> str:
    return "\n\n".join(f"Source {idx + 1} ({hit.title}):\n{hit.chunk_text}" for idx, hit in enumerate(hits))


def build_sources(hits: Sequence[ScoredHit]) -> str:
    return "\n".join(f"[S{idx + 1}] {hit.title} - {hit.url}" for idx, hit in enumerate(hits))


def build_system_prompt(product_name: str) -> str:
    return " ".join(
        [
            f"You are a helpful support assistant for {product_name}.",
            f"Answer questions using the provided context from the {product_name} documentation and troubleshooting guide.",
            "Be friendly, helpful, and encouraging. Use a casual, supportive tone.",
            "Always prioritize connection troubleshooting when users have issues connecting.",
            "If the answer is not in the provided sources, politely say that you don't have that information "
            "but can help with other questions.",
            "Cite sources inline as [S1], [S2] etc.",
            "Respond in the user's language (English by default).",
        ]
    )


def build_messages(question: str, hits: Sequence[ScoredHit], product_name: str) -> list[dict]:
    """Assemble the system and user turns for a grounded answer."""
    user_prompt = (
        f"User question:\n{question}\n\n"
        f"Context:\n{build_context(hits)}\n\n"
        "When you answer, include inline citations like [S1], [S2].\n\n"
        f"Sources:\n{build_sources(hits)}"
    )
    return [
        {"role": "system", "content": build_system_prompt(product_name)},
        {"role": "user", "content": user_prompt},
    ]


def to_source_refs(hits: Sequence[ScoredHit]) -> list[SourceRef]:
    return [
        SourceRef(source_id=f"S{idx + 1}", title=hit.title, url=hit.url, score=round(hit.score, 3))
        for idx, hit in enumerate(hits)
    ]


class CompletionClient:
    """Chat-completion caller for an OpenAI-compatible ``/v1/chat/completions`` backend."""

    def __init__(self, settings: AISettings, client: AsyncOpenAI | None = None):
        self.model = settings.chat_model
        self.temperature = settings.temperature
        self.client = client or build_openai_client(settings)

    async def complete(self, messages: list[dict]) -> str:
        """Return the first choice's message content (``""`` when absent).

        Raises:
            CompletionError: The backend returned a non-2xx status or could not
                be reached.
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
            )
        except APIStatusError as exc:
            raise CompletionError(
                f"Model error {exc.status_code}: {exc.response.text}",
                status_code=exc.status_code,
            ) from exc
        except APIError as exc:
            raise CompletionError(f"Model error: {exc}") from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def __call__(self, messages: list[dict]) -> str:
        return await self.complete(messages)


async def answer_question(
    message: str,
    corpus: Sequence[Document],
    *,
    embed: Embedder,
    complete: Completer,
    k: int = DEFAULT_TOP_K,
    product_name: str | None = None,
    help_document: HelpDocument | None = None,
    model_name: str = "",
    settings: AISettings | None = None,
) -> ChatReply:
    """Answer a user question from the corpus plus the built-in help guide.

    Args:
        message: The user's question.
        corpus: Session corpus or the default corpus; may be empty.
        embed: Async text-to-vector callable.
        complete: Async chat-completion callable taking a message list.
        k: Number of chunks to ground the answer on.
        product_name: Product the assistant supports, used in prompts.
            Defaults to ``settings.product_name``.
        help_document: FAQ document override.
        model_name: Chat model name recorded on the generation span.
            Defaults to ``settings.chat_model`` when settings are given.
        settings: Backend settings supplying the defaults above.

    Returns:
        The model reply plus numbered source references.

    Raises:
        InvalidQueryError: ``message`` is empty or blank.
        EmbeddingError, CompletionError: A backend call failed.
    """
    if not isinstance(message, str) or not message.strip():
        raise InvalidQueryError("message must be a non-empty string")

    if product_name is None:
        product_name = (settings or AISettings()).product_name
    if not model_name and settings is not None:
        model_name = settings.chat_model

    tracer = get_tracer("site_rag.chat")
    retrieve_fn = traced_retrieval(retrieve, tracer)
    generate_fn = traced_generation(complete, tracer, model_name=model_name)

    hits = await retrieve_fn(message, corpus, embed, k, help_document=help_document)
    if not hits:
        logger.info("No grounding available, returning fallback reply")
        return ChatReply(reply=FALLBACK_REPLY.format(product=product_name), sources=[])

    reply = await generate_fn(build_messages(message, hits, product_name))
    return ChatReply(reply=reply, sources=to_source_refs(hits))
