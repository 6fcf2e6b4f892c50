"""Immutable dashboard state snapshot."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from marsdash._constants import DEFAULT_ROVER, DEFAULT_USER_NAME
from marsdash.config import ApiVariant


class UserProfile(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = DEFAULT_USER_NAME


class DashboardState(BaseModel):
    """One complete, consistent view of the dashboard.

    Snapshots are never modified in place: :meth:`merge` returns a new
    snapshot, and ``rover_data`` is a read-only mapping that is replaced by
    a fresh one whenever an entry is added. Payloads stored in
    ``rover_data`` are opaque JSON and are only ever read defensively by the
    views.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user: UserProfile = Field(default_factory=UserProfile)
    rovers: tuple[str, ...] = ()
    selected_rover: str = DEFAULT_ROVER
    rover_data: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    loading: bool = False
    error: str | None = None

    @field_validator("rovers", mode="before")
    @classmethod
    def _coerce_rovers(cls, value: Any) -> Any:
        if isinstance(value, Sequence) and not isinstance(value, str):
            return tuple(value)
        return value

    @field_validator("rover_data", mode="before")
    @classmethod
    def _copy_rover_data(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return dict(value)
        return value

    @field_validator("rover_data", mode="after")
    @classmethod
    def _freeze_rover_data(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def _selected_rover_is_known(self) -> DashboardState:
        if self.rovers and self.selected_rover not in self.rovers:
            raise ValueError(f"selected_rover {self.selected_rover!r} is not one of {self.rovers}")
        return self

    @classmethod
    def initial(
        cls,
        variant: ApiVariant,
        *,
        rovers: Sequence[str] | None = None,
        user_name: str = DEFAULT_USER_NAME,
    ) -> DashboardState:
        """Snapshot created at page load."""
        names = tuple(rovers) if rovers is not None else variant.default_rovers
        selected = DEFAULT_ROVER if DEFAULT_ROVER in names else names[0]
        return cls(user=UserProfile(name=user_name), rovers=names, selected_rover=selected)

    def merge(self, partial: Mapping[str, Any]) -> DashboardState:
        """Shallow top-level merge of *partial* into a new snapshot.

        Keys absent from *partial* keep their current values; nested values
        are replaced, not merged.
        """
        unknown = set(partial) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown state keys: {sorted(unknown)}")
        merged = {name: getattr(self, name) for name in type(self).model_fields}
        merged.update(partial)
        return type(self).model_validate(merged)

    def with_rover_data(self, rover: str, payload: Any) -> dict[str, Any]:
        """A new ``rover_data`` mapping with *rover* set to *payload*."""
        return {**self.rover_data, rover: payload}

    @property
    def current_rover_data(self) -> Any | None:
        return self.rover_data.get(self.selected_rover)
