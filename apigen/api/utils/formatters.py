"""Code formatting utilities."""

import black

from apigen.api.gen_logging import get_logger

logger = get_logger(__name__)


def format_python_code(code: str) -> str:
    """Format generated Python code with Black; return it unchanged if Black rejects it."""
    try:
        return black.format_str(code, mode=black.FileMode())
    except Exception as e:
        logger.warning(f"[WARN] black could not format generated code: {e}")
        return code
