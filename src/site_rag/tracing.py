"""OpenTelemetry tracing helpers for ingestion, retrieval and answer generation.

Spans are created through the global OTel API, so nothing is exported until
:func:`configure_tracing` installs a provider:

    from site_rag.tracing import configure_tracing, get_tracer, traced_retrieval

    configure_tracing(endpoint="http://localhost:6006/v1/traces", service_name="site-rag")
    tracer = get_tracer("site_rag.chat")
    retrieve_fn = traced_retrieval(retrieve, tracer)
    hits = await retrieve_fn("how do I reach support?", corpus, embed)

Without a backend (development, tests) pass an exporter explicitly, e.g. an
``InMemorySpanExporter``, or call ``configure_tracing()`` for console output.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor, SpanExporter

from .schema import ScoredHit

# OpenInference semantic-convention attribute names (subset)
ATTR_INPUT_VALUE = "input.value"
ATTR_OUTPUT_VALUE = "output.value"
ATTR_LLM_MODEL_NAME = "llm.model_name"
ATTR_RETRIEVAL_DOCUMENTS = "retrieval.documents"

# Ingestion attributes
ATTR_INGEST_URL = "ingest.url"
ATTR_INGEST_PAGES = "ingest.pages"
ATTR_INGEST_DOCUMENTS = "ingest.documents"

_provider: TracerProvider | None = None


def configure_tracing(
    endpoint: str | None = None,
    service_name: str = "site-rag",
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """Create and register a global TracerProvider.

    Args:
        endpoint: OTLP HTTP endpoint to send traces to. When None and no
            *exporter* is given, spans are printed to stdout.
        service_name: Service label shown in the observability backend.
        exporter: Pre-built exporter; takes precedence over *endpoint*.

    Returns:
        The configured provider, also installed as the global OTel provider.
    """
    global _provider

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))

    if exporter is not None:
        chosen_exporter: SpanExporter = exporter
    elif endpoint is not None:
        try:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
                OTLPSpanExporter,
            )
        except ImportError as exc:  # pragma: no cover
            raise ImportError(
                "opentelemetry-exporter-otlp-proto-http is required to export "
                "traces to an OTLP endpoint. Install the 'otlp' extra."
            ) from exc
        chosen_exporter = OTLPSpanExporter(endpoint=endpoint)
    else:
        chosen_exporter = ConsoleSpanExporter()

    provider.add_span_processor(SimpleSpanProcessor(chosen_exporter))
    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


def get_tracer(name: str) -> trace.Tracer:
    """Return a tracer from the configured provider, or the global no-op one."""
    if _provider is not None:
        return _provider.get_tracer(name)
    return trace.get_tracer(name)


def traced_retrieval(
    retriever: Callable[..., Awaitable[list[ScoredHit]]],
    tracer: trace.Tracer,
) -> Callable[..., Awaitable[list[ScoredHit]]]:
    """Wrap an async retriever so every call is recorded as a ``retrieval`` span.

    The span records the query, the number of hits and the outcome. Exceptions
    are recorded on the span and re-raised.
    """

    async def _wrapped(query: str, *args, **kwargs) -> list[ScoredHit]:
        with tracer.start_as_current_span("retrieval") as span:
            span.set_attribute(ATTR_INPUT_VALUE, query)
            try:
                hits = await retriever(query, *args, **kwargs)
            except Exception as exc:
                span.set_status(trace.StatusCode.ERROR, str(exc))
                span.record_exception(exc)
                raise
            span.set_attribute(ATTR_RETRIEVAL_DOCUMENTS, len(hits))
            span.set_status(trace.StatusCode.OK)
            return hits

    return _wrapped


def traced_generation(
    complete: Callable[[list[dict]], Awaitable[str]],
    tracer: trace.Tracer,
    model_name: str = "",
) -> Callable[[list[dict]], Awaitable[str]]:
    """Wrap an async completion callable in a ``generation`` span.

    The span records the last message content as input, the model name when
    given, and the first 500 characters of the answer.
    """

    async def _wrapped(messages: list[dict]) -> str:
        with tracer.start_as_current_span("generation") as span:
            if messages:
                span.set_attribute(ATTR_INPUT_VALUE, str(messages[-1].get("content", "")))
            if model_name:
                span.set_attribute(ATTR_LLM_MODEL_NAME, model_name)
            try:
                answer = await complete(messages)
            except Exception as exc:
                span.set_status(trace.StatusCode.ERROR, str(exc))
                span.record_exception(exc)
                raise
            span.set_attribute(ATTR_OUTPUT_VALUE, answer[:500])
            span.set_status(trace.StatusCode.OK)
            return answer

    return _wrapped
