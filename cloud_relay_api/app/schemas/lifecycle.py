"""Lifecycle actions accepted by the start/stop/restart endpoints."""

from enum import Enum


class LifecycleAction(str, Enum):
    start = "start"
    stop = "stop"
    restart = "restart"
