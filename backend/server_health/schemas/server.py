"""
Pydantic schema for a server list entry.
"""
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

ROLE_SEPARATORS = re.compile(r"[,;|\s]+")


class ServerRecord(BaseModel):
    """A server to check, with the role tags that select its checks."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Host name used for remote queries")
    location: str = ""
    description: str = ""
    roles: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("server name is empty")
        return value

    @field_validator("roles", mode="before")
    @classmethod
    def _split_roles(cls, value):
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = ROLE_SEPARATORS.split(value)
        return frozenset(tag.strip().lower() for tag in value if tag and tag.strip())

    def has_role(self, tag: str) -> bool:
        return tag.lower() in self.roles
