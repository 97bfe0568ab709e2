"""aifns: LLM conversations with typed function calling via Ollama.

This package turns pydantic-described functions into capabilities a model can
call, and runs the conversation loop that dispatches those calls and feeds
the results back until the model answers. It is served as a FastAPI app and
as an interactive command-line chat.
"""

__version__ = "0.1.0"

from aifns.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
