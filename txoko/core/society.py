from __future__ import annotations

from typing import Any

from txoko.core.exceptions import SocietyMissingError


def society_id_for(user: Any) -> int:
    """Return the tenant key of ``user`` or raise ``SocietyMissingError``."""
    society_id = getattr(user, "society_id", None)
    if not society_id:
        raise SocietyMissingError
    return int(society_id)
