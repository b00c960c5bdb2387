"""
Tool declaration and resolved tool call types.

``Tool`` describes a function the model may call; adapters translate it into
each provider's schema shape. ``ToolCall`` is a fully resolved invocation
whose ``arguments_json`` is always a complete JSON document.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal


@dataclass(frozen=True)
class Tool:
    """A function tool declared on a request.

    Attributes:
        name: Function name exposed to the model.
        description: Natural-language description of what the tool does.
        parameter_schema: JSON Schema object describing the arguments.
        kind: Tool kind; only ``"function"`` exists today.
    """

    name: str
    description: str = ""
    parameter_schema: Dict[str, Any] = field(default_factory=dict)
    kind: Literal["function"] = "function"


@dataclass(frozen=True)
class ToolCall:
    """A model-issued tool invocation with complete JSON arguments."""

    id: str
    name: str
    arguments_json: str = "{}"


__all__ = ["Tool", "ToolCall"]
