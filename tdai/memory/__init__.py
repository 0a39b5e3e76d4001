"""Memory subsystem package.

Architectural role:
    `conversation_manager` holds the bounded, process-local per-caller state
    (recent turns and last substantive question). Nothing is persisted.
"""
