# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-09
# Updated: 2026-10-01
# Description: settings.py
# -----------------------------------------------------------------------------
import os


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name, "")
    if v == "":
        return default
    v = v.lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    raise RuntimeError(f"Env var {name} must be a boolean, got {v!r}")


# -----------------------------------------------------------------------------
# Vector storage (Chroma collection name)
# -----------------------------------------------------------------------------
CHAT_EMBEDDINGS_COLLECTION = _env("CHAT_EMB_COLLECTION", "chat_embeddings")


# -----------------------------------------------------------------------------
# API
# -----------------------------------------------------------------------------
API_PREFIX = _env("CHAT_EMB_API_PREFIX", "/api/chat-embeddings")

# Upper bound on records removed by one session cleanup call
SESSION_CLEANUP_LIMIT = _env_int("CHAT_EMB_SESSION_CLEANUP_LIMIT", 1000)

# Connect to the store while building the app container instead of on first use
EAGER_CONNECT = _env_bool("CHAT_EMB_EAGER_CONNECT", False)


# -----------------------------------------------------------------------------
# Sanity checks (tunable)
# -----------------------------------------------------------------------------
if not CHAT_EMBEDDINGS_COLLECTION:
    raise RuntimeError("CHAT_EMBEDDINGS_COLLECTION resolved to empty value")

if SESSION_CLEANUP_LIMIT < 1:
    raise RuntimeError("SESSION_CLEANUP_LIMIT must be at least 1")
