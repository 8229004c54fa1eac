"""
Notification strategies — which run outcomes trigger a message.

    success | always | failonly | failandrecover | statuschange | successonly
    --------+--------+----------+----------------+--------------+------------
    true    | yes    | -        | if last failed | if last fail | yes
    false   | yes    | yes      | yes            | if last ok   | -
"""

from enum import Enum


class Strategy(str, Enum):
    ALWAYS = "always"
    FAIL_ONLY = "failonly"
    FAIL_AND_RECOVER = "failandrecover"
    STATUS_CHANGE = "statuschange"
    SUCCESS_ONLY = "successonly"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]


def should_notify(strategy: Strategy, success: bool, last_run_failed: bool) -> bool:
    """Decide whether the current outcome warrants a notification."""
    if success:
        return (
            strategy in (Strategy.ALWAYS, Strategy.SUCCESS_ONLY)
            or (last_run_failed and strategy in (Strategy.FAIL_AND_RECOVER, Strategy.STATUS_CHANGE))
        )

    return (
        strategy in (Strategy.ALWAYS, Strategy.FAIL_ONLY, Strategy.FAIL_AND_RECOVER)
        or (strategy is Strategy.STATUS_CHANGE and not last_run_failed)
    )
