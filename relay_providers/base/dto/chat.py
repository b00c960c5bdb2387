"""
Pydantic DTOs validating canonical chat requests.

Purpose
-------
Adapters accept plain ``ChatRequest`` dataclasses. Before any network I/O
the request is mirrored into these DTOs so malformed input (empty
conversation, out-of-range temperature, unknown role) fails fast with a
``ProviderError`` of code ``VALIDATION`` instead of an upstream 400.

External dependencies: Pydantic only.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..errors import ErrorCode, ProviderError
from ..models import ChatRequest

RoleDTO = Literal["system", "user", "assistant"]


class ToolCallDTO(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    arguments_json: str = "{}"


class MessageDTO(BaseModel):
    """A chat message.

    Rules:
        - ``role`` must be one of ``system``, ``user``, ``assistant``.
        - A ``user`` message needs non-blank ``content`` or tool results.
          ``system`` and ``assistant`` messages may be empty (an assistant
          turn that only carried tool calls, or one that was cut short).
    """

    role: RoleDTO
    content: str = ""
    tool_calls: Optional[List[ToolCallDTO]] = None
    tool_results: Optional[Any] = None

    @model_validator(mode="after")
    def _validate_content(self) -> "MessageDTO":
        if self.role == "user" and self.content.strip() == "" and self.tool_results is None:
            raise ValueError("user message must have content or tool results")
        return self


class ToolDTO(BaseModel):
    kind: Literal["function"] = "function"
    name: str = Field(..., min_length=1)
    description: str = ""
    parameter_schema: Dict[str, Any] = Field(default_factory=dict)


class ChatRequestDTO(BaseModel):
    """Validated mirror of :class:`ChatRequest`.

    Parameters:
        model: Target model identifier (non-empty).
        messages: Ordered, non-empty conversation.
        temperature: If provided, within ``[0.0, 2.0]``.
        max_output_tokens: If provided, non-negative.
        tools: Optional tool declarations.
        stream: Streaming intent flag.

    Raises:
        ValidationError: On invalid roles, empty conversation or
            out-of-range parameters.
    """

    model: str = Field(..., min_length=1)
    messages: List[MessageDTO] = Field(..., min_length=1)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_output_tokens: Optional[int] = Field(default=None, ge=0)
    tools: Optional[List[ToolDTO]] = None
    stream: bool = False


def validate_request(request: ChatRequest, *, provider: str) -> ChatRequestDTO:
    """Validate ``request`` and return its DTO mirror.

    Raises:
        ProviderError: code ``VALIDATION`` listing every failed constraint,
            attributed to ``provider``.
    """
    try:
        return ChatRequestDTO.model_validate(asdict(request))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'request'}: {err['msg']}" for err in exc.errors()
        )
        raise ProviderError(
            code=ErrorCode.VALIDATION,
            message=f"invalid request: {problems}",
            provider=provider,
            model=getattr(request, "model", None),
            raw=exc,
        ) from exc


__all__ = [
    "RoleDTO",
    "ToolCallDTO",
    "MessageDTO",
    "ToolDTO",
    "ChatRequestDTO",
    "validate_request",
]
