"""
Logging configuration for the anchoring engine

Includes IndentLogger for tree-style visualization of the resolver tiers.
Indentation state is kept per thread so batches resolved concurrently do not
mix their tree prefixes.
"""

import io
import logging
import sys
import threading
from contextlib import contextmanager


class _IndentState(threading.local):
    """Per-thread indentation level and open branches"""

    def __init__(self) -> None:
        self.level = 0
        self.active_branches: set[int] = set()


class GlobalIndent:
    """Indentation and tree state for hierarchical logging"""

    _state = _IndentState()
    _tree_chars = {
        "pipe": "│",
        "branch": "├──",
        "leaf": "└──",
    }

    @classmethod
    def increase(cls) -> None:
        """Increase indentation level"""
        cls._state.level += 1
        cls._state.active_branches.add(cls._state.level - 1)

    @classmethod
    def decrease(cls) -> None:
        """Decrease indentation level"""
        if cls._state.level > 0:
            cls._state.active_branches.discard(cls._state.level - 1)
            cls._state.level -= 1

    @classmethod
    def reset(cls) -> None:
        """Reset indentation state for the current thread (useful for tests)"""
        cls._state.level = 0
        cls._state.active_branches = set()

    @classmethod
    def level(cls) -> int:
        return cls._state.level

    @classmethod
    def get_indent(cls) -> str:
        """Get current indentation string with tree characters"""
        level = cls._state.level
        if level == 0:
            return ""

        active = cls._state.active_branches
        parts = []
        for i in range(level - 1):
            if i in active:
                parts.append(f"{cls._tree_chars['pipe']}   ")
            else:
                parts.append("    ")

        is_end = (level - 1) not in active
        parts.append(cls._tree_chars["leaf"] if is_end else cls._tree_chars["branch"])
        return "".join(parts)


class IndentLogger:
    """Logger wrapper that handles indentation using per-thread state"""

    def __init__(self, base_logger: logging.Logger) -> None:
        self._logger = base_logger

    def debug(self, msg: str, *args, **kwargs) -> None:
        """Log debug message with indentation"""
        self._logger.debug(f"{self.indent}{msg}", *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        """Log info message with indentation"""
        self._logger.info(f"{self.indent}{msg}", *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        """Log warning message with indentation"""
        self._logger.warning(f"{self.indent}{msg}", *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        """Log error message with indentation"""
        self._logger.error(f"{self.indent}{msg}", *args, **kwargs)

    def is_debug_enabled(self) -> bool:
        return self._logger.isEnabledFor(logging.DEBUG)

    @property
    def indent(self) -> str:
        """Get current indentation string"""
        return GlobalIndent.get_indent()

    @contextmanager
    def indent_block(self, initial_message: str | None = None):
        """
        Context manager for handling indentation blocks

        Args:
            initial_message: Optional message to log at block start
        """
        if initial_message:
            self.debug(initial_message)
        GlobalIndent.increase()
        try:
            yield
        finally:
            GlobalIndent.decrease()


def setup_logging(level=logging.INFO):
    """
    Configure logging for the anchoring engine

    Args:
        level: Logging level (default: INFO)

    Returns:
        IndentLogger: Configured logger with indentation support
    """
    base_logger = logging.getLogger("anchoring")
    base_logger.setLevel(level)

    # Remove existing handlers
    base_logger.handlers = []

    # UTF-8 console stream so the tree characters survive on any platform
    stream = io.TextIOWrapper(sys.stderr.buffer, encoding="utf-8", errors="replace")
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)8s %(message)s"))

    base_logger.addHandler(handler)

    return IndentLogger(base_logger)


# Default logger with indentation support
logger = IndentLogger(logging.getLogger("anchoring"))
