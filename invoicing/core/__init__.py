from .config import settings
from .database import engine, SessionLocal, Base

__all__ = ["settings", "engine", "SessionLocal", "Base"]
