"""Block type registry for handler lookup and registration.

The registry maps block names to BlockType descriptors. The renderer
consults it for every named block it meets.

One process-wide instance exists (BlockTypeRegistry.get_instance()), with
the core block types registered on first access. Independent registries
can be created for isolated rendering and tests.

Thread Safety:
Registration and removal take a lock. Lookups are plain dict reads and
need no lock. Callers must not mutate a registry that another thread is
rendering with unless they accept that renders may see either state.

Example:
    >>> registry = BlockTypeRegistry()
    >>> registry.register("my-plugin/notice", render_callback=render_notice)
    BlockType(name='my-plugin/notice', ...)
    >>> registry.is_registered("my-plugin/notice")
    True
"""

from __future__ import annotations

import re
import threading
from typing import Any, ClassVar

from ladrillos.block_type import BlockType
from ladrillos.errors import (
    BlockTypeNotFoundError,
    DuplicateBlockTypeError,
    InvalidBlockNameError,
)
from ladrillos.utils.logger import get_logger

logger = get_logger(__name__)

_NAME_PATTERN = re.compile(r"^[a-z0-9-]+/[a-z0-9-]+$")


def _validate_name(name: object) -> str:
    if not isinstance(name, str):
        raise InvalidBlockNameError(name, "Block type names must be strings.")
    if name != name.lower():
        raise InvalidBlockNameError(
            name, "Block type names must not contain uppercase characters."
        )
    if not _NAME_PATTERN.match(name):
        raise InvalidBlockNameError(
            name,
            "Block type names must contain a namespace prefix. "
            "Example: my-plugin/my-custom-block-type",
        )
    return name


class BlockTypeRegistry:
    """Mutable mapping of block names to block types.

    register() and unregister() fail loudly: registering a taken name
    raises DuplicateBlockTypeError, removing an absent one raises
    BlockTypeNotFoundError.
    """

    __slots__ = ("_types", "_lock")

    _instance: ClassVar[BlockTypeRegistry | None] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._types: dict[str, BlockType] = {}
        self._lock = threading.Lock()

    def register(self, name_or_type: str | BlockType, **settings: Any) -> BlockType:
        """Register a block type.

        Args:
            name_or_type: A BlockType, or a block name to build one from
            **settings: BlockType settings when a name is given
                (render_callback, attributes, title, ...)

        Returns:
            The registered BlockType

        Raises:
            InvalidBlockNameError: If the name is not "namespace/name"
            DuplicateBlockTypeError: If the name is already registered
            TypeError: If settings are combined with a BlockType
        """
        if isinstance(name_or_type, BlockType):
            if settings:
                msg = "settings cannot be combined with a BlockType instance"
                raise TypeError(msg)
            block_type = name_or_type
            name = _validate_name(block_type.name)
        else:
            name = _validate_name(name_or_type)
            block_type = BlockType.from_settings(name, settings)

        with self._lock:
            if name in self._types:
                raise DuplicateBlockTypeError(name)
            self._types[name] = block_type

        logger.debug(
            "Registered %s block type %s",
            "dynamic" if block_type.is_dynamic() else "static",
            name,
        )
        return block_type

    def unregister(self, name: str | BlockType) -> BlockType:
        """Remove a block type.

        Args:
            name: Block name, or the BlockType itself

        Returns:
            The removed BlockType

        Raises:
            BlockTypeNotFoundError: If the name is not registered
        """
        if isinstance(name, BlockType):
            name = name.name
        with self._lock:
            block_type = self._types.pop(name, None)
        if block_type is None:
            raise BlockTypeNotFoundError(name)
        logger.debug("Unregistered block type %s", name)
        return block_type

    def get_registered(self, name: str) -> BlockType | None:
        """Get the block type registered under name, or None."""
        return self._types.get(name)

    def get_all_registered(self) -> dict[str, BlockType]:
        """Snapshot of all registered block types."""
        return dict(self._types)

    def is_registered(self, name: str) -> bool:
        """Check if a block name is registered."""
        return name in self._types

    def get_dynamic_block_names(self) -> list[str]:
        """Names of the registered block types that have a render callback."""
        return [name for name, block_type in self._types.items() if block_type.is_dynamic()]

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    @classmethod
    def get_instance(cls) -> BlockTypeRegistry:
        """Get the process-wide registry, creating it on first use.

        The instance starts with the core block types registered.
        """
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = create_registry_with_defaults()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Discard the process-wide registry; the next get_instance() rebuilds it."""
        with cls._instance_lock:
            cls._instance = None


def create_registry_with_defaults() -> BlockTypeRegistry:
    """Create a new registry with the core block types registered.

    Use this for isolated rendering that should not see, or disturb,
    registrations made on the process-wide instance.
    """
    from ladrillos.builtins import register_core_block_types

    registry = BlockTypeRegistry()
    register_core_block_types(registry)
    return registry


def register_block_type(name_or_type: str | BlockType, **settings: Any) -> BlockType:
    """Register a block type on the process-wide registry."""
    return BlockTypeRegistry.get_instance().register(name_or_type, **settings)


def unregister_block_type(name: str | BlockType) -> BlockType:
    """Remove a block type from the process-wide registry."""
    return BlockTypeRegistry.get_instance().unregister(name)


def get_dynamic_block_names(registry: BlockTypeRegistry | None = None) -> list[str]:
    """Names of dynamic block types (process-wide registry by default)."""
    if registry is None:
        registry = BlockTypeRegistry.get_instance()
    return registry.get_dynamic_block_names()
