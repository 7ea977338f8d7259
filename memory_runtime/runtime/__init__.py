from .config import RuntimeConfig, configure_file_logging
from .runtime import Runtime, create_runtime
from .session import Session

__all__ = ["Runtime", "RuntimeConfig", "Session", "configure_file_logging", "create_runtime"]
