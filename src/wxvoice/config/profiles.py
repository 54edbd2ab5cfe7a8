"""Configuration profile management.

Selects the configuration profile from the environment.
"""

import os
from enum import Enum
from pathlib import Path

PROFILE_ENV = "WXVOICE_PROFILE"

DEFAULT_CONFIG_DIR = Path(__file__).parent.parent.parent.parent / "config"


class Profile(Enum):
    """Available configuration profiles."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


def detect_profile() -> Profile:
    """Detect the configuration profile.

    Uses the WXVOICE_PROFILE environment variable; anything unset or
    unrecognized means dev.

    Returns:
        Profile enum value
    """
    env_profile = os.environ.get(PROFILE_ENV, "").strip().lower()
    profile_map = {
        "prod": Profile.PROD,
        "production": Profile.PROD,
        "dev": Profile.DEV,
        "test": Profile.TEST,
    }
    return profile_map.get(env_profile, Profile.DEV)


__all__ = [
    "DEFAULT_CONFIG_DIR",
    "PROFILE_ENV",
    "Profile",
    "detect_profile",
]
