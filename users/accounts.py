import logging
from dataclasses import dataclass

from common.errors import ValidationError, PermissionDenied

logger = logging.getLogger(__name__)

# Registered users are always customers. Managers are created by an administrator.
CUSTOMER = 'customer'
MANAGER = 'manager'

# Coordinates in the data set are plain numbers in this range, not real degrees.
COORDINATE_MIN = 0.0
COORDINATE_MAX = 100.0


@dataclass(frozen=True)
class Session:
    """The logged in user."""
    user_id: int
    user_type: str

    @property
    def is_manager(self):
        # The type column is CHAR(8), so values come back padded.
        return self.user_type.strip().lower() == MANAGER


def require_manager(session):
    if session is None or not session.is_manager:
        raise PermissionDenied("Invalid permissions. This option is for store managers only.")


def parse_coordinate(field, value):
    """Converts user input to a float in [0, 100]."""
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(field, value, "must be a number")
    if not COORDINATE_MIN <= number <= COORDINATE_MAX:
        raise ValidationError(field, value, f"must be between {COORDINATE_MIN} and {COORDINATE_MAX}")
    return number


def create_user(gateway, name, password, latitude, longitude):
    """
    Registers a new customer.

    Returns:
        int: The number of rows inserted.
    """
    if not name or not name.strip():
        raise ValidationError("name", name, "must not be empty")
    if not password:
        raise ValidationError("password", password, "must not be empty")
    latitude = parse_coordinate("latitude", latitude)
    longitude = parse_coordinate("longitude", longitude)

    inserted = gateway.execute_update(
        "INSERT INTO Users (name, password, latitude, longitude, type) VALUES (%s, %s, %s, %s, %s);",
        (name.strip(), password, latitude, longitude, CUSTOMER)
    )
    logger.info("Created user '%s'.", name.strip())
    return inserted


def log_in(gateway, name, password):
    """
    Checks login credentials.

    Returns:
        Session or None: None when no user matches the name and password.
    """
    row = gateway.fetch_one(
        "SELECT userID, type FROM Users WHERE name = %s AND password = %s;",
        (name, password)
    )
    if row is None:
        logger.info("Failed login for '%s'.", name)
        return None
    session = Session(int(row[0]), row[1].strip().lower())
    logger.info("User %s logged in as %s.", session.user_id, session.user_type)
    return session
