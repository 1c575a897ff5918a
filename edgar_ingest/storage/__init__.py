from .temp_store import TempStore  # noqa: F401
