import logging


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(f"romplan.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler()
        fmt = logging.Formatter("[%(levelname)s] %(name)s: %(message)s")
        handler.setFormatter(fmt)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def safe_snippet(text: str, n: int = 400) -> str:
    return (text or "")[:n].replace("\n", "\\n").replace("\r", "\\r")


"""
Logging setup and it configures:
- Log format
- Log level
- Output destination
- Single-line snippets of model text for warnings

The main purpose:
Standardized application logging.
"""
