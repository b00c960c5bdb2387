"""relay_providers package

One adapter contract over several chat-completion providers (OpenAI,
Anthropic, Google Gemini, OpenRouter, Requesty).

Public API (re-exported):
    - Version: ``__version__``
    - Canonical model: :class:`ChatRequest`, :class:`ChatResponse`,
      :class:`Message`, :class:`Tool`, :class:`ToolCall`,
      :class:`StreamChunk`, :class:`ModelDescriptor`
    - Errors: :class:`ProviderError` and its subclasses, :class:`ErrorCode`
    - Factory: :class:`ProviderFactory`, :func:`create`, :func:`get_factory`
    - Catalog: :class:`ModelCatalog`, :func:`get_catalog`
    - Streaming helper: :func:`accumulate_chunks`

Typical use::

    adapter = create("openrouter", api_key)
    adapter.send_streaming(request, on_chunk)
"""

from .base.cancellation import CancellationToken
from .base.errors import (
    ErrorCode,
    MissingCredentialError,
    ProviderError,
    UnsupportedProviderError,
    UpstreamDecodeError,
    UpstreamTransportError,
)
from .base.factory import ProviderFactory, create, get_factory
from .base.interfaces import ProviderAdapter
from .base.models import (
    ChatRequest,
    ChatResponse,
    Message,
    ModelDescriptor,
    StreamChunk,
    StreamDelta,
    Tool,
    ToolCall,
    ToolCallDelta,
)
from .base.streaming import StreamState, accumulate_chunks
from .catalog import ModelCatalog, get_catalog

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CancellationToken",
    "ErrorCode",
    "ProviderError",
    "MissingCredentialError",
    "UnsupportedProviderError",
    "UpstreamTransportError",
    "UpstreamDecodeError",
    "ProviderFactory",
    "create",
    "get_factory",
    "ProviderAdapter",
    "ChatRequest",
    "ChatResponse",
    "Message",
    "ModelDescriptor",
    "StreamChunk",
    "StreamDelta",
    "Tool",
    "ToolCall",
    "ToolCallDelta",
    "StreamState",
    "accumulate_chunks",
    "ModelCatalog",
    "get_catalog",
]
