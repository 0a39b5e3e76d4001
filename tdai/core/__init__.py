"""Core orchestration package.

Architectural role:
    Exposes the request-orchestration layer that sits between API/CLI entrypoints
    and lower-level subsystems (classification, search, scoring, prompting,
    memory, and LLM adapters).

Composition:
    - `engine`: Main control-flow implementation for request processing.
    - `decision`: Final "do we search" policy with the future-question override.
    - `routing_types`: Shared per-request records consumed across layers.

Determinism and side effects:
    Package import itself is deterministic and side-effect free. Runtime side effects
    are performed by `engine` during request processing.
"""
