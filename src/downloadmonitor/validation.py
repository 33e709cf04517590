# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Local input validation, applied before any network call."""

from __future__ import annotations

from downloadmonitor.constants import FILE_ID_MAX, FILE_ID_MIN
from downloadmonitor.errors import FileIdValidationError


def validate_file_id(value: object) -> int:
    """Return ``value`` as a file id or raise ``FileIdValidationError``.

    Accepts ints and decimal strings (form input) in
    ``[FILE_ID_MIN, FILE_ID_MAX]``. Booleans and floats are rejected.
    """
    if isinstance(value, bool):
        raise FileIdValidationError(value, FILE_ID_MIN, FILE_ID_MAX)
    if isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            raise FileIdValidationError(value, FILE_ID_MIN, FILE_ID_MAX)
        candidate = int(text)
    elif isinstance(value, int):
        candidate = value
    else:
        raise FileIdValidationError(value, FILE_ID_MIN, FILE_ID_MAX)

    if not FILE_ID_MIN <= candidate <= FILE_ID_MAX:
        raise FileIdValidationError(value, FILE_ID_MIN, FILE_ID_MAX)
    return candidate


__all__ = ["validate_file_id"]
