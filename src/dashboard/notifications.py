"""Transient notices raised by dashboard events."""

from dataclasses import dataclass

SUCCESS = "success"
ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


def success(message: str) -> Notification:
    return Notification(SUCCESS, message)


def error(message: str) -> Notification:
    return Notification(ERROR, message)
