"""
Notifier configuration — parsed once from the host's configuration map.

Keys (all optional except ``webhook``):
    webhook, channel, channelOnFail, username, icon, messagePrefix,
    messageSuffix, messageSuffixOnFail, strategy, extended,
    extendedMaxErrors, extendedMaxLength
"""

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from result_notifier.core.strategy import Strategy
from result_notifier.errors import ConfigurationError

DEFAULT_EXTENDED_MAX_LENGTH = 80

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _is_empty(value: Any) -> bool:
    return not value or value == "0"


def _to_int(value: Any) -> int:
    """Loose integer parsing: leading digits win, anything else is 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def _split_channels(value: Any) -> tuple[str, ...]:
    # Names are trimmed at send time, not here
    return tuple(str(value).split(","))


def _strip_quotes(value: str) -> str:
    stripped = value
    if value.startswith('"'):
        stripped = stripped[1:]
    if value.endswith('"'):
        stripped = stripped[:-1]
    return stripped


class NotifierConfig(BaseModel):
    model_config = {"frozen": True}

    webhook: str
    channels: tuple[str, ...] = ()
    channels_on_fail: tuple[str, ...] = ()
    username: str | None = None
    icon: str | None = None
    message_prefix: str = ""
    message_suffix: str = ""
    message_suffix_on_fail: str = ""
    strategy: Strategy = Strategy.ALWAYS
    extended: bool = False
    extended_max_errors: int = 0  # 0 = send all failures
    extended_max_length: int = DEFAULT_EXTENDED_MAX_LENGTH  # <= 0 = unlimited

    @property
    def fail_channels(self) -> tuple[str, ...]:
        return self.channels_on_fail or self.channels

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "NotifierConfig":
        """Validate and normalize a configuration map.

        Raises:
            ConfigurationError: on the first invalid or missing value.
        """
        cfg = {k: v for k, v in raw.items() if v is not None}

        if _is_empty(cfg.get("webhook")):
            raise ConfigurationError("webhook", "configuration for 'webhook' is missing")

        values: dict[str, Any] = {"webhook": str(cfg["webhook"])}

        if "channel" in cfg:
            if _is_empty(cfg["channel"]):
                raise ConfigurationError(
                    "channel", 'The specified value for key "channel" must not be empty.'
                )
            values["channels"] = _split_channels(cfg["channel"])

        if "username" in cfg:
            values["username"] = str(cfg["username"])

        if "icon" in cfg:
            values["icon"] = str(cfg["icon"])

        if "messagePrefix" in cfg:
            values["message_prefix"] = f"{cfg['messagePrefix']} "

        if "messageSuffix" in cfg:
            values["message_suffix"] = " " + _strip_quotes(str(cfg["messageSuffix"]))

        if "messageSuffixOnFail" in cfg:
            values["message_suffix_on_fail"] = f" {cfg['messageSuffixOnFail']}"

        if "channelOnFail" in cfg:
            if _is_empty(cfg["channelOnFail"]):
                raise ConfigurationError(
                    "channelOnFail", 'The specified value for key "channelOnFail" must not be empty.'
                )
            values["channels_on_fail"] = _split_channels(cfg["channelOnFail"])

        if "strategy" in cfg:
            if cfg["strategy"] not in Strategy.values():
                raise ConfigurationError(
                    "strategy",
                    f'"{cfg["strategy"]}" is not a valid notification "strategy". '
                    f"Possible values are: {','.join(Strategy.values())}",
                )
            values["strategy"] = Strategy(cfg["strategy"])

        values["extended"] = cfg.get("extended") is True or cfg.get("extended") == "true"

        if "extendedMaxErrors" in cfg:
            values["extended_max_errors"] = max(_to_int(cfg["extendedMaxErrors"]), 0)

        if "extendedMaxLength" in cfg:
            values["extended_max_length"] = _to_int(cfg["extendedMaxLength"])

        return cls(**values)
