import os
import re

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: tuple[str, ...] = ()) -> tuple[str, ...]:
    if value is None or not value.strip():
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


APP_ENV = os.getenv("APP_ENV", "development")
DEBUG = _get_bool(os.getenv("DEBUG"), default=False)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./barbershop.db")

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), default=("http://localhost:5173",))


TWELVE_HOUR_SLOT_CATALOGUE = (
    "09:00 AM", "09:30 AM", "10:00 AM", "10:30 AM",
    "11:00 AM", "11:30 AM", "12:00 PM", "12:30 PM",
    # closed for lunch
    "02:00 PM", "02:30 PM", "03:00 PM", "03:30 PM",
    "04:00 PM", "04:30 PM", "05:00 PM", "05:30 PM",
    "06:00 PM", "06:30 PM", "07:00 PM", "07:30 PM",
    "08:00 PM", "08:30 PM", "09:00 PM", "09:30 PM",
    "10:00 PM", "10:30 PM", "11:00 PM", "11:30 PM",
)

TWENTY_FOUR_HOUR_SLOT_CATALOGUE = (
    "09:00", "10:00", "11:00", "12:00", "13:00", "14:00",
    "15:00", "16:00", "17:00", "18:00", "19:00", "20:00",
)

SLOT_CATALOGUE_VARIANTS = {
    "12h": TWELVE_HOUR_SLOT_CATALOGUE,
    "24h": TWENTY_FOUR_HOUR_SLOT_CATALOGUE,
}

_TWELVE_HOUR_LABEL = re.compile(r"^(0?[1-9]|1[0-2]):[0-5]\d ?(AM|PM)$", re.IGNORECASE)
_TWENTY_FOUR_HOUR_LABEL = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d$")


def is_valid_slot_label(label: str) -> bool:
    return bool(_TWELVE_HOUR_LABEL.match(label) or _TWENTY_FOUR_HOUR_LABEL.match(label))


def parse_slot_catalogue(raw: str | None, variant: str = "12h") -> tuple[str, ...]:
    # SLOT_CATALOGUE wins over SLOT_CATALOGUE_VARIANT when both are set.
    #   SLOT_CATALOGUE=09:00 AM,09:30 AM,10:00 AM
    #   SLOT_CATALOGUE_VARIANT=24h
    if raw is None or not raw.strip():
        normalized_variant = variant.strip().lower()
        if normalized_variant not in SLOT_CATALOGUE_VARIANTS:
            raise RuntimeError(
                f"Invalid SLOT_CATALOGUE_VARIANT value: {variant!r}. "
                f"Expected one of {sorted(SLOT_CATALOGUE_VARIANTS)}."
            )
        return SLOT_CATALOGUE_VARIANTS[normalized_variant]

    seen: set[str] = set()
    labels: list[str] = []
    for label in _get_list(raw):
        if not is_valid_slot_label(label):
            raise RuntimeError(f"Invalid SLOT_CATALOGUE entry: {label!r}. Expected 'hh:mm AM' or 'HH:MM'.")
        if label in seen:
            raise RuntimeError(f"Duplicate SLOT_CATALOGUE entry: {label!r}.")
        seen.add(label)
        labels.append(label)

    if not labels:
        raise RuntimeError("SLOT_CATALOGUE is empty. Provide at least one slot label.")

    return tuple(labels)


SLOT_CATALOGUE = parse_slot_catalogue(
    os.getenv("SLOT_CATALOGUE"),
    variant=os.getenv("SLOT_CATALOGUE_VARIANT", "12h"),
)

DEFAULT_CANCELLATION_REASON = os.getenv("DEFAULT_CANCELLATION_REASON", "No reason provided")

BARBER_WHATSAPP_NUMBER = os.getenv("BARBER_WHATSAPP_NUMBER", "")

ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "change-me")

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))


def validate_runtime_config() -> None:
    if APP_ENV.lower() != "production":
        return
    if JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if ADMIN_PASSWORD == "change-me":
        raise RuntimeError("ADMIN_PASSWORD must be set in production.")
