"""
Available image descriptions, by short name.
"""
from typing import Dict, Type

from ..errors import ImageConfigError
from .postgis import Postgis
from .postgres import Postgres

IMAGES: Dict[str, Type] = {
    "postgres": Postgres,
    "postgis": Postgis,
}


def get_image_class(name: str) -> Type:
    """
    Looks up an image class by short name.

    :raises ImageConfigError: If no image is registered under `name`.
    """
    try:
        return IMAGES[name]
    except KeyError:
        known = ", ".join(sorted(IMAGES))
        raise ImageConfigError(f"Unknown image '{name}' (expected one of: {known})") from None
