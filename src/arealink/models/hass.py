"""Registry and state records as the hub sends them.

Only the fields the data manager relies on are declared; anything else the hub sends is kept
as extra data so that records round-trip unchanged.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HassArea(BaseModel):
    """Entry of the area registry."""

    model_config = ConfigDict(extra="allow")

    area_id: str
    """Unique, human readable id of the area."""

    name: str

    floor_id: str | None = Field(default=None)


class HassDevice(BaseModel):
    """Entry of the device registry."""

    model_config = ConfigDict(extra="allow")

    id: str

    area_id: str | None = Field(default=None)

    name: str | None = Field(default=None)

    name_by_user: str | None = Field(default=None)

    manufacturer: str | None = Field(default=None)

    model: str | None = Field(default=None)


class HassEntity(BaseModel):
    """Entry of the entity registry."""

    model_config = ConfigDict(extra="allow")

    entity_id: str

    device_id: str | None = Field(default=None)


class HassEntityState(BaseModel):
    """Compressed entity state, as delivered by `subscribe_entities`.

    `s` holds the raw state string and `a` the attribute mapping. Both are optional because
    change patches only carry the fields that changed.
    """

    model_config = ConfigDict(extra="allow")

    s: Any = Field(default=None)
    """Raw state value, e.g. 'on', 'off', '21.5' or 'unavailable'."""

    a: dict[str, Any] | None = Field(default=None)
    """Entity attributes."""

    def merged_with(self, patch: "HassEntityState") -> "HassEntityState":
        """Return a copy of this state with the fields present in `patch` overwritten.

        The merge is shallow: an `a` in the patch replaces the whole attribute mapping.
        """
        data = self.model_dump(exclude_unset=True)
        data.update(patch.model_dump(exclude_unset=True))
        return HassEntityState.model_validate(data)


class HassEntityStateChange(BaseModel):
    """Change entry of a `subscribe_entities` event, keyed by entity id in the event."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    additions: HassEntityState | None = Field(default=None, alias="+")
    """Fields that were added or changed."""

    removals: dict[str, Any] | None = Field(default=None, alias="-")
    """Fields that were removed."""
