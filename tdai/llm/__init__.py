"""Completion-model access for TDAI.

Module split:
    - `provider_config`: provider, model names, timeouts and credentials from
      the environment.
    - `service`: final-answer generation (stream, then one non-stream
      fallback) and low-temperature structured calls.
    - `client`: OpenAI-compatible HTTP transport; every failure surfaces as
      `CompletionError`.
"""
