"""Shared type aliases used across roost modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler — receives (request, response), returns None or (status, body)
Handler: TypeAlias = Callable[..., Any]

# Error handler — receives (request, response, error), same return convention
ErrorHandler: TypeAlias = Callable[..., Any]
