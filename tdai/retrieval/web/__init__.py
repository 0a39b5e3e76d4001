"""Web search subpackage.

Architectural role:
    Provides the provider-specific search gateway used by core orchestration
    for volatile questions.

Security model:
    Provider titles and snippets are treated as untrusted text and sanitized
    before they reach prompt-construction layers.
"""
