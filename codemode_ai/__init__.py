"""codemode-ai.

This package contains the agent code-execution orchestrator ("codemode") used
by the content/SEO platform to let a language model chain many external data
calls inside a single tool call.

High-level architecture
-----------------------

Instead of exposing dozens of individual tools to the model, the platform
exposes exactly one: *run this script*. The model writes a short async Python
script that calls named capabilities, and the orchestrator runs it and returns
a structured result.

Core subpackages
----------------

- ``codemode_ai.providers``:

  - MCP-backed capability providers (search data, crawling, originality
    detection, web extraction) and single-function HTTP adapters (research
    search, text generation, page scraping, chat completion).

- ``codemode_ai.cache``:

  - Read-through TTL cache over an in-process or Redis key-value store.

- ``codemode_ai.capabilities``:

  - Capability data model, the registry, and the best-effort aggregator that
    merges every provider into one namespaced registry.

- ``codemode_ai.sandbox``:

  - Script compilation into an identifier-isolated scope and deadline-bound
    execution with structured results.

- ``codemode_ai.orchestrator``:

  - The model-facing tool descriptor and the factory wiring everything from
    settings.

Typical workflow
----------------

1. Build a registry with ``RegistryAggregator.build_registry()``.
2. Wrap it with ``make_orchestration_tool(registry)`` and hand the tool to the
   model host.
3. The model emits script text; ``tool.run(code)`` executes it and returns
   ``{"success": ..., "result"|"error": ..., "type": ...}``.

Script failures, capability failures and timeouts are always returned as data;
provider outages only shrink the registry.
"""
