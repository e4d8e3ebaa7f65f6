"""Logging configuration model."""

from typing import Literal

from pydantic import BaseModel

type LogLevel = Literal["debug", "info", "warning", "error"]


class LoggingConfig(BaseModel, frozen=True):
    format: Literal["console", "json"] = "console"
    level: LogLevel = "info"
