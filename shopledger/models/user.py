"""User account models."""

from pydantic import BaseModel, ConfigDict, Field

from shopledger.models.transaction import CamelModel


class UserRecord(BaseModel):
    """
    A stored user, including the password hash.

    Only the storage and auth layers see this model. The API
    responds with PublicUser.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    password_hash: str

    def to_public(self) -> "PublicUser":
        return PublicUser(id=self.id, username=self.username, name=self.name)


class PublicUser(CamelModel):
    """User as returned by the API."""

    id: int
    username: str
    name: str


class RegisterRequest(CamelModel):
    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Unique login name"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )
    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
    )


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)
