# python
"""
fsreplay/env.py
Locate and load the .env file that holds FSREPLAY_* settings.
"""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)


def locate_env_file() -> Optional[Path]:
    """Nearest .env in the working directory or one of its parents."""
    found = find_dotenv(filename=".env", usecwd=True)
    return Path(found) if found else None


def read_env_file(dotenv_path: Optional[Path] = None) -> Optional[Path]:
    dotenv_path = dotenv_path or locate_env_file()
    if dotenv_path is None:
        logger.debug("No .env found from %s", Path.cwd())
        return None
    # variables already exported in the shell win over the file
    load_dotenv(dotenv_path=dotenv_path, override=False)
    logger.debug("Loaded settings from %s", dotenv_path)
    return Path(dotenv_path)


@lru_cache(maxsize=1)
def load_env() -> Optional[Path]:
    """Load the working directory's .env once per process."""
    return read_env_file()
