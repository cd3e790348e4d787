"""atelier_providers.config.defaults
=================================

Central place for small, stable default values used across the
atelier_providers package. These defaults can be overridden via environment
variables or an external configuration file, but provide sensible fallbacks
for local development and tests.

Module Purpose
--------------
- Provide a single import location for conservative default constants (no I/O).
- Keep adapters free of magic literals (endpoints, keyword heuristics,
  timeout budgets).

This module intentionally avoids importing from other packages to prevent
circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Endpoints ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"

OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_DEFAULT_MODEL = "openrouter/auto"

GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
GEMINI_DEFAULT_MODEL = "gemini-2.5-flash-image-preview"
GEMINI_API_VERSION = "v1beta"

# Path fragments used by URL resolution.
VERSION_SEGMENT = "/v1"
COMPLETIONS_PATH = "/chat/completions"
RESPONSES_PATH = "/responses"

# ---- Timeouts (seconds, per attempt) ----
STANDARD_TIMEOUT_SECONDS = 300.0
THINKING_TIMEOUT_SECONDS = 600.0
# Model-id substrings that select the long timeout budget.
THINKING_MODEL_KEYWORDS = ("gpt-5", "o1", "thinking")

# ---- Max-tokens parameter naming ----
MAX_TOKENS_PARAM = "max_tokens"
MAX_COMPLETION_TOKENS_PARAM = "max_completion_tokens"
# Lowercased model-id substrings that imply ``max_completion_tokens``.
COMPLETION_TOKENS_MODEL_KEYWORDS = ("gpt-5", "o1", "o3", "o4", "reasoning")

# ---- Streaming ----
DONE_SENTINEL = "[DONE]"
OPENROUTER_PROCESSING_COMMENT = ": OPENROUTER PROCESSING"

# ---- Model discovery heuristics ----
IMAGE_MODEL_KEYWORDS = ("image", "imagen", "img")
NON_IMAGE_MODEL_KEYWORDS = ("text-only", "code-only", "chat-only")

# ---- Drawing ----
DEFAULT_IMAGE_MIME_TYPE = "image/png"
# Bare strings shorter than this are never treated as base64 image payloads.
MIN_BASE64_IMAGE_LENGTH = 64

__all__ = [
    "OPENAI_DEFAULT_BASE_URL",
    "OPENAI_DEFAULT_MODEL",
    "OPENROUTER_DEFAULT_BASE_URL",
    "OPENROUTER_DEFAULT_MODEL",
    "GEMINI_DEFAULT_BASE_URL",
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_API_VERSION",
    "VERSION_SEGMENT",
    "COMPLETIONS_PATH",
    "RESPONSES_PATH",
    "STANDARD_TIMEOUT_SECONDS",
    "THINKING_TIMEOUT_SECONDS",
    "THINKING_MODEL_KEYWORDS",
    "MAX_TOKENS_PARAM",
    "MAX_COMPLETION_TOKENS_PARAM",
    "COMPLETION_TOKENS_MODEL_KEYWORDS",
    "DONE_SENTINEL",
    "OPENROUTER_PROCESSING_COMMENT",
    "IMAGE_MODEL_KEYWORDS",
    "NON_IMAGE_MODEL_KEYWORDS",
    "DEFAULT_IMAGE_MIME_TYPE",
    "MIN_BASE64_IMAGE_LENGTH",
]
