"""Reference ID generation for export jobs."""

import secrets
import string

REFERENCE_PREFIX = "EXP_"
REFERENCE_SUFFIX_LENGTH = 10
_ALPHABET = string.ascii_uppercase + string.digits


def generate_reference_id() -> str:
    """Return a new reference ID such as ``EXP_7QK2M9XA4B``.

    Each suffix character is drawn independently from the OS CSPRNG.
    """
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(REFERENCE_SUFFIX_LENGTH))
    return f"{REFERENCE_PREFIX}{suffix}"
