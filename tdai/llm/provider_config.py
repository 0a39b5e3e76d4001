"""Provider/runtime configuration for the LLM layer.

Architectural role:
    Centralizes model/provider selection, timeouts and credential lookup for
    `tdai.llm.service` and `tdai.llm.client`.

Model call flow integration:
    - `service.generate_answer` consumes `MODEL_NAME`, `CLASSIFIER_MODEL` and
      the generation defaults.
    - `client.send_request` consumes the provider endpoint map and `load_key`.

Determinism:
    Deterministic for a fixed process environment and key files. Values are
    resolved at import time (plus runtime key-file reads in `load_key`).

Failure behavior:
    Missing key material is represented as `None`; `client` turns it into a
    `CompletionError` for keyed providers.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Primary model routing controls.
PROVIDER = os.getenv("PROVIDER", "openai").strip().lower()
MODEL_NAME = os.getenv("MODEL_NAME", os.getenv("OPENAI_MODEL", "gpt-4o"))
CLASSIFIER_MODEL = os.getenv("CLASSIFIER_MODEL", "gpt-4o-mini")

# Timeouts (seconds). A timeout is handled like any other provider failure.
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
CLASSIFIER_TIMEOUT_SECONDS = float(os.getenv("CLASSIFIER_TIMEOUT_SECONDS", "15"))

# Generation defaults for the final answer.
ANSWER_TEMPERATURE = float(os.getenv("ANSWER_TEMPERATURE", "0.3"))
ANSWER_MAX_TOKENS = int(os.getenv("ANSWER_MAX_TOKENS", "800"))

# Structured calls (classifier, entity router, query rewriter).
CLASSIFIER_TEMPERATURE = 0.0
CLASSIFIER_MAX_TOKENS = 200

# OpenAI-compatible chat-completion endpoints. `key_file` is None for keyless
# local servers; `load_key` also accepts `<STEM>_API_KEY` from the environment.
PROVIDERS = {
    "openai": {"url": "https://api.openai.com/v1/chat/completions", "key_file": "config/openai.key"},
    "mistral": {"url": "https://api.mistral.ai/v1/chat/completions", "key_file": "config/mistral.key"},
    "groq": {"url": "https://api.groq.com/openai/v1/chat/completions", "key_file": "config/groq.key"},
    "openrouter": {"url": "https://openrouter.ai/api/v1/chat/completions", "key_file": "config/openrouter.key"},
    "together": {"url": "https://api.together.xyz/v1/chat/completions", "key_file": "config/together.key"},
    "local": {"url": os.getenv("LOCAL_LLM_URL", "http://127.0.0.1:8080/v1/chat/completions"), "key_file": None},
}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/openai.key` -> `OPENAI_API_KEY`).
        2. Raw file contents at `path`.

    Edge cases:
        - `None` path returns `None`.
        - Missing file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value.strip()
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None


def provider_available() -> bool:
    """Whether the configured provider is known and has credentials (if it needs any)."""
    config = PROVIDERS.get(PROVIDER)
    if config is None:
        return False
    if not config["key_file"]:
        return True
    return bool(load_key(config["key_file"]))


# The advisory classifiers are skipped entirely when there are no credentials.
MODEL_CLASSIFIER_ENABLED = _env_flag("MODEL_CLASSIFIER_ENABLED", provider_available())
