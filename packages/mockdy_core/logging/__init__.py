from .config import get_logger, setup_logging, LOG_DIR, LOG_FORMAT, LOG_DATEFMT

__all__ = ["get_logger", "setup_logging", "LOG_DIR", "LOG_FORMAT", "LOG_DATEFMT"]
