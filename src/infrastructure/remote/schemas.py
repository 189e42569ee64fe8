"""Pydantic schemas for the random profile endpoint."""

from pydantic import BaseModel, ConfigDict, field_validator


class _RemoteModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Name(_RemoteModel):
    title: str = ""
    first: str
    last: str


class Street(_RemoteModel):
    number: int = 0
    name: str = ""


class Coordinates(_RemoteModel):
    latitude: str = ""
    longitude: str = ""


class Timezone(_RemoteModel):
    offset: str = ""
    description: str = ""


class Location(_RemoteModel):
    street: Street = Street()
    city: str = ""
    state: str = ""
    country: str = ""
    postcode: str = ""
    coordinates: Coordinates = Coordinates()
    timezone: Timezone = Timezone()

    @field_validator("postcode", mode="before")
    @classmethod
    def _postcode_as_text(cls, value: object) -> str:
        # Some nationalities come back with numeric postcodes
        return "" if value is None else str(value)


class Login(_RemoteModel):
    uuid: str
    username: str = ""
    password: str = ""
    salt: str = ""
    md5: str = ""
    sha1: str = ""
    sha256: str = ""


class DatedAge(_RemoteModel):
    date: str = ""
    age: int = 0


class NationalId(_RemoteModel):
    name: str | None = None
    value: str | None = None


class Picture(_RemoteModel):
    large: str = ""
    medium: str = ""
    thumbnail: str = ""


class RemoteProfile(_RemoteModel):
    """One generated profile as returned by the endpoint."""

    gender: str = ""
    name: Name
    location: Location = Location()
    email: str
    login: Login
    dob: DatedAge = DatedAge()
    registered: DatedAge = DatedAge()
    phone: str = ""
    cell: str = ""
    id: NationalId = NationalId()
    picture: Picture = Picture()
    nat: str = ""


class ResponseInfo(_RemoteModel):
    seed: str = ""
    results: int = 0
    page: int = 1
    version: str = ""


class RandomProfileResponse(_RemoteModel):
    """Envelope: a ``results`` array plus ``info`` metadata."""

    results: list[RemoteProfile] = []
    info: ResponseInfo = ResponseInfo()
