from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    user = "USER"
    admin = "ADMIN"


class Difficulty(str, Enum):
    easy = "EASY"
    moderate = "MODERATE"
    hard = "HARD"


class RouteSource(str, Enum):
    manual = "MANUAL"
    ors = "ORS"
