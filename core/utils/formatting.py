import math
from datetime import datetime
from typing import Any, Optional

BYTE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def format_bytes(num_bytes: Optional[int], decimals: int = 2) -> str:
    """
    Formats a byte count with base-1024 units.
    0 / None -> "0 Bytes", 1536 -> "1.5 KB", 1048576 -> "1 MB".
    Trailing zeros of the decimal part are dropped.
    """
    if not num_bytes or num_bytes <= 0:
        return "0 Bytes"

    decimals = max(decimals, 0)
    index = min(int(math.floor(math.log(num_bytes, 1024))), len(BYTE_UNITS) - 1)
    # log() may round just below an exact power of 1024
    if index + 1 < len(BYTE_UNITS) and num_bytes >= 1024 ** (index + 1):
        index += 1

    value = round(num_bytes / (1024 ** index), decimals)
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {BYTE_UNITS[index]}"


def format_upload_date(val: Any, locale: str = "en") -> str:
    """Formats an ISO timestamp as a short date for list views."""
    if not val:
        return "---"

    val_str = str(val)
    locale_clean = locale.split("_")[0].lower()
    try:
        dt = datetime.fromisoformat(val_str.replace("Z", "+00:00"))
    except ValueError:
        return val_str

    if locale_clean == "de":
        return dt.strftime("%d.%m.%Y")
    if locale_clean == "id":
        return dt.strftime("%d/%m/%Y")
    return dt.strftime("%Y-%m-%d")
