from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class StopRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    location: str = Field(min_length=3, max_length=300)
    date: str | None = Field(default=None, max_length=40)
    time: str | None = Field(default=None, max_length=40)


class ContactRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=254)
    phone: str = Field(min_length=1, max_length=50)
    company: str | None = Field(default=None, max_length=200)


class CargoRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    cargo_type: str | None = Field(default=None, max_length=200)
    special_requirements: list[str] = Field(default_factory=list)


class RoutePlanRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pickup: StopRequest
    delivery: StopRequest
    contact: ContactRequest
    cargo: CargoRequest = Field(default_factory=CargoRequest)
    transport_mode: Literal["truck", "car"] = "truck"


class LocationResponse(BaseModel):
    address: str
    city: str
    state: str
    postal_code: str
    date: str
    time: str


class RankedRouteResponse(BaseModel):
    rank: int
    score: float
    toll_cost: float
    fuel_cost: float
    miles: float
    duration_hours: float
    adverse_conditions: list[str]
    enrichment_status: Literal["ok", "partial"]


class ExcludedRouteResponse(BaseModel):
    index: int
    reason: str


class RoutePlanResponse(BaseModel):
    plan_id: int | None = None
    pickup: LocationResponse
    delivery: LocationResponse
    contact: ContactRequest
    cargo: CargoRequest
    routes: list[RankedRouteResponse]
    excluded_routes: list[ExcludedRouteResponse]


class EmailParseRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    subject: str = Field(min_length=1, max_length=1000)
    body: str = Field(min_length=1, max_length=50000)


class OrderStop(BaseModel):
    date: str | None = None
    time: str | None = None


class OrderContact(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    company: str | None = None


class OrderCargo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cargo_type: str | None = Field(default=None, alias="cargoType")
    special_requirements: list[str] | None = Field(default=None, alias="specialRequirements")


class OrderDetails(BaseModel):
    """Order fields extracted from a shipping request email."""

    model_config = ConfigDict(populate_by_name=True)

    pickup: OrderStop = Field(default_factory=OrderStop)
    delivery: OrderStop = Field(default_factory=OrderStop)
    contact: OrderContact = Field(default_factory=OrderContact)
    cargo: OrderCargo = Field(default_factory=OrderCargo)
    recommended_price_per_mile: float = Field(default=0.0, alias="recommendedPricePerMile")


class OfferStop(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: str = ""
    city: str
    state: str
    date: str = ""
    time: str = ""
    postal_code: str = Field(default="", alias="postalCode")


class OfferContact(BaseModel):
    name: str
    email: str = ""
    phone: str = ""
    company: str | None = None


class OfferCargo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cargo_type: str | None = Field(default=None, alias="cargoType")
    special_requirements: list[str] | None = Field(default=None, alias="specialRequirements")


class TollInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    driver_cost: float | None = Field(default=None, alias="driverCost")
    fuel_cost: float | None = Field(default=None, alias="fuelCost")


class OfferDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pickup: OfferStop
    delivery: OfferStop
    contact: OfferContact
    cargo: OfferCargo = Field(default_factory=OfferCargo)
    toll_info: TollInfo | None = Field(default=None, alias="tollInfo")
    miles: float | None = None
    duration: float | None = None
    bad_route_conditions: list[str] | None = Field(default=None, alias="badRouteConditions")


class OfferEmailRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    details: OfferDetails
    email_id: str = Field(min_length=1, max_length=500)
    subject_prefix: str = Field(default="RE:", max_length=50)


class OfferEmail(BaseModel):
    subject: str
    body: str


# External response schemas


class HereAddress(BaseModel):
    label: str = ""
    house_number: str = Field(default="", alias="houseNumber")
    street: str = ""
    city: str = ""
    state: str = ""
    state_code: str = Field(default="", alias="stateCode")
    postal_code: str = Field(default="", alias="postalCode")


class HerePosition(BaseModel):
    lat: float
    lng: float


class HereGeocodeItem(BaseModel):
    address: HereAddress
    position: HerePosition


class HereGeocodeResponse(BaseModel):
    items: list[HereGeocodeItem] = Field(default_factory=list)


class HereFarePrice(BaseModel):
    value: float = 0.0


class HereFare(BaseModel):
    price: HereFarePrice = Field(default_factory=HereFarePrice)


class HereToll(BaseModel):
    fares: list[HereFare] = Field(default_factory=list)


class HereSectionSummary(BaseModel):
    length: float = 0.0
    duration: float = 0.0
    consumption: float = 0.0


class HereSection(BaseModel):
    polyline: str
    summary: HereSectionSummary = Field(default_factory=HereSectionSummary)
    tolls: list[HereToll] = Field(default_factory=list)


class HereRoute(BaseModel):
    id: str = ""
    sections: list[HereSection] = Field(default_factory=list)


class HereRoutesResponse(BaseModel):
    routes: list[HereRoute] = Field(default_factory=list)


class ElevationResult(BaseModel):
    latitude: float
    longitude: float
    elevation: float


class ElevationResponse(BaseModel):
    results: list[ElevationResult] = Field(default_factory=list)


class ChatMessage(BaseModel):
    role: str = "assistant"
    content: str | None = None


class ChatChoice(BaseModel):
    message: ChatMessage = Field(default_factory=ChatMessage)


class ChatCompletionResponse(BaseModel):
    choices: list[ChatChoice] = Field(default_factory=list)
