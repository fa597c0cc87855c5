"""Utility functions for Kracker Core.

Import convention: use module-level imports for clarity.

    from utils import isodatetime, uid
    timestamp = isodatetime.now()
    unix_ts = isodatetime.now_unix()
    user_id = uid.generate_uuid()
"""

from . import isodatetime, uid

__all__ = ["isodatetime", "uid"]
