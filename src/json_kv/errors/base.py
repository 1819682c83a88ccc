from collections.abc import Mapping

ExtraInfoType = Mapping[str, str | int | float | bool | None]


class JSONStoreError(Exception):
    """Base exception for all JSON store errors."""

    def __init__(self, message: str | None = None, extra_info: ExtraInfoType | None = None):
        message_parts: list[str] = []

        if message:
            message_parts.append(message)

        if extra_info:
            extra_info_str = ";".join(f"{k}: {v}" for k, v in extra_info.items())
            if message:
                extra_info_str = "(" + extra_info_str + ")"

            message_parts.append(extra_info_str)

        super().__init__(": ".join(message_parts))
