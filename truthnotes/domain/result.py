"""Explicit success/failure values returned by the core operations."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")
E = TypeVar("E")


class Ok(BaseModel, Generic[T]):
    """A successful outcome carrying its value."""

    value: T

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


class Err(BaseModel, Generic[E]):
    """A failed outcome carrying the error that caused it."""

    error: E

    model_config = {"frozen": True, "arbitrary_types_allowed": True}
