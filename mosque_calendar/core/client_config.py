"""
Per-client document (clients/<id>.json): identity, contact details, location and theme.

A requested client that cannot be loaded is a blocking error: printing a
calendar under another association's name is worse than printing nothing.
"""
import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from mosque_calendar.core.errors import ClientConfigError
from mosque_calendar.prayer.models import PrayerTimesConfig

logger = logging.getLogger(__name__)


class Identity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name_fr: str
    name_ta: str = ""
    logo_url: str = ""


class BankDetails(BaseModel):
    iban: str
    bic: str = ""


class Contact(BaseModel):
    model_config = ConfigDict(extra="ignore")

    addr1: str = ""
    addr2: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    bank: Optional[BankDetails] = None
    donation_url: Optional[str] = None


class Location(BaseModel):
    lat: float
    lng: float
    timezone: Optional[str] = None


class Theme(BaseModel):
    model_config = ConfigDict(extra="ignore")

    color_brand: Optional[str] = None
    color_year_theme: Optional[str] = None
    bg_header_cream: Optional[str] = None


class ClientConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    identity: Identity
    contact: Contact = Contact()
    location: Optional[Location] = None
    theme: Theme = Theme()


def load_client_config(client_id: str, clients_dir: Union[str, Path]) -> ClientConfig:
    """Read and validate <clients_dir>/<client_id>.json. Raises ClientConfigError."""
    if not client_id or "/" in client_id or "\\" in client_id or client_id.startswith("."):
        raise ClientConfigError(f"Invalid client id: {client_id!r}")

    path = Path(clients_dir).expanduser() / f"{client_id}.json"
    if not path.exists():
        raise ClientConfigError(f"Configuration '{client_id}' not found ({path})")

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        raise ClientConfigError(f"Configuration '{client_id}' is unreadable: {e}") from e

    try:
        client = ClientConfig.model_validate(raw)
    except ValidationError as e:
        raise ClientConfigError(f"Configuration '{client_id}' is invalid: {e}") from e

    logger.info(f"Loaded client configuration {client_id}: {client.identity.name_fr}")
    return client


def apply_client_location(config: PrayerTimesConfig, client: Optional[ClientConfig]) -> PrayerTimesConfig:
    """Return a copy of config using the client's coordinates and time zone when given."""
    result = config.copy()
    if client is None or client.location is None:
        return result
    result.latitude = client.location.lat
    result.longitude = client.location.lng
    if client.location.timezone:
        result.timezone = client.location.timezone
    return result
