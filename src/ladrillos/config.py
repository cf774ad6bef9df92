"""ContextVar-based render configuration for Ladrillos.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is set once per Blocks instance call and read by every renderer
created in that context.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed.

Usage:
    # Via the high-level class
    blocks = Blocks(config=RenderConfig(unknown_blocks="passthrough"))
    html = blocks(post_content)

    # Or use the context manager
    with render_config_context(RenderConfig(max_depth=16)):
        html = do_blocks(post_content)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Literal

UnknownBlockPolicy = Literal["drop", "passthrough"]


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable render configuration.

    Attributes:
        unknown_blocks: What to do with blocks whose type is not registered.
            "drop" renders them as an empty string; "passthrough" keeps their
            static inner content (delimiters are still removed).
        max_depth: Deepest block nesting that is rendered. Blocks nested
            deeper render as an empty string.

    """

    unknown_blocks: UnknownBlockPolicy = "drop"
    max_depth: int = 200

    def __post_init__(self) -> None:
        if self.unknown_blocks not in ("drop", "passthrough"):
            msg = f"unknown_blocks must be 'drop' or 'passthrough', got {self.unknown_blocks!r}"
            raise ValueError(msg)
        if self.max_depth < 1:
            msg = f"max_depth must be at least 1, got {self.max_depth}"
            raise ValueError(msg)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "RenderConfig":
        """Create RenderConfig from dictionary.

        Only includes keys that are valid RenderConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = RenderConfig.from_dict({"max_depth": 8, "theme": "ignored"})
            >>> config.max_depth
            8

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: RenderConfig = RenderConfig()

_render_config: ContextVar[RenderConfig] = ContextVar(
    "render_config",
    default=_DEFAULT_CONFIG,
)


def get_render_config() -> RenderConfig:
    """Get current render configuration (thread-local)."""
    return _render_config.get()


def set_render_config(config: RenderConfig) -> None:
    """Set render configuration for current context.

    Args:
        config: RenderConfig instance to use for this context.

    """
    _render_config.set(config)


def reset_render_config() -> None:
    """Reset to the module-level default configuration."""
    _render_config.set(_DEFAULT_CONFIG)


@contextmanager
def render_config_context(config: RenderConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Example:
        >>> with render_config_context(RenderConfig(unknown_blocks="passthrough")):
        ...     html = do_blocks("<!-- wp:my/widget --><b>hi</b><!-- /wp:my/widget -->")
        >>> html
        '<b>hi</b>'

    Thread Safety:
        Only affects the current thread's context. Restores the previous
        config even if an exception is raised.

    """
    previous = _render_config.get()
    _render_config.set(config)
    try:
        yield
    finally:
        _render_config.set(previous)


__all__ = [
    "RenderConfig",
    "UnknownBlockPolicy",
    "get_render_config",
    "set_render_config",
    "reset_render_config",
    "render_config_context",
]
