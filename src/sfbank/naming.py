# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

import re
from pathlib import PurePath

from .constants import MAX_NAME_LENGTH

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def sanitize_preset_name(path) -> str:
    """
    Derives a preset name from a file path.

    The extension is dropped, every character other than ASCII letters,
    digits, "_" and "-" becomes "_", and the result is cut to 128 characters.
    An empty base name gives an empty string.

    Args:
        path: The source file path.

    Returns:
        The sanitized name.
    """
    stem = PurePath(str(path)).stem
    return _INVALID_NAME_CHARS.sub("_", stem)[:MAX_NAME_LENGTH]
