"""Core app configuration, database and security primitives."""

from tokengate.core.config import Settings, get_settings
from tokengate.core.database import build_engine, build_session_factory, get_db

__all__ = ["Settings", "get_settings", "build_engine", "build_session_factory", "get_db"]
