"""Incoming Facebook group webhook models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.constants import GROUP_OBJECT, REPLYABLE_FIELDS


class _GraphModel(BaseModel):
    """Base for webhook payload models: unknown keys ignored, ids coerced to str."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


def _readable_items(model: type[BaseModel], items: Any) -> Any:
    """Validate list items one by one, dropping the ones that don't fit `model`.

    Non-list values are returned untouched so the list type check still applies.
    """
    if not isinstance(items, list):
        return items
    readable = []
    for item in items:
        try:
            readable.append(model.model_validate(item))
        except ValidationError:
            continue
    return readable


class ChangeValue(_GraphModel):
    """Body of one change: the message and the object it was posted on."""

    message: str | None = None
    post_id: str | None = None
    comment_id: str | None = None

    @property
    def target_id(self) -> str | None:
        """First non-empty of post_id and comment_id."""
        return self.post_id or self.comment_id or None


class Change(_GraphModel):
    """A single field change inside an entry."""

    field: str | None = None
    value: ChangeValue = Field(default_factory=ChangeValue)

    @property
    def is_replyable(self) -> bool:
        return self.field in REPLYABLE_FIELDS


class EventEntry(_GraphModel):
    """Facebook webhook entry.

    Changes that don't fit the Change shape (e.g. a reaction whose value is a
    bare string) are dropped, so they never hide the readable ones.
    """

    changes: list[Change] = Field(default_factory=list)

    @field_validator("changes", mode="before")
    @classmethod
    def drop_unreadable_changes(cls, v: Any) -> Any:
        return _readable_items(Change, v)


class InboundEvent(_GraphModel):
    """Facebook group change notification."""

    object: str | None = None
    entry: list[EventEntry] = Field(default_factory=list)

    @field_validator("entry", mode="before")
    @classmethod
    def drop_unreadable_entries(cls, v: Any) -> Any:
        return _readable_items(EventEntry, v)

    @property
    def is_group_event(self) -> bool:
        return self.object == GROUP_OBJECT


class ReplyRequest(BaseModel):
    """A reply to post: derived from one qualifying change, never stored."""

    target_id: str
    text: str
