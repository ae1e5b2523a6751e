"""Content references and representations.

Items and layouts are identified by kind and identifier only; their content
lives in the site's data store.  A rep is one compiled variant of an item
(``default``, ``text``, ...) with an output path per snapshot.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar, Literal, Protocol, TypeAlias, runtime_checkable


@dataclass(frozen=True, slots=True)
class Item:
    """Reference to a content item.

    Attributes:
        identifier: Path-like identifier, e.g. ``"/blog/hello/"``.

    """

    kind: ClassVar[Literal["item"]] = "item"

    identifier: str

    def __repr__(self) -> str:
        return f"<Item identifier={self.identifier!r}>"


@dataclass(frozen=True, slots=True)
class Layout:
    """Reference to a layout.

    Attributes:
        identifier: Path-like identifier, e.g. ``"/default/"``.

    """

    kind: ClassVar[Literal["layout"]] = "layout"

    identifier: str

    def __repr__(self) -> str:
        return f"<Layout identifier={self.identifier!r}>"


ContentRef: TypeAlias = Item | Layout

CONTENT_REF_TYPES: tuple[type, ...] = (Item, Layout)


@runtime_checkable
class Rep(Protocol):
    """What listeners need to know about an item representation."""

    @property
    def item(self) -> Item: ...

    @property
    def name(self) -> str: ...

    @property
    def compiled(self) -> bool: ...

    @property
    def binary(self) -> bool: ...

    @property
    def raw_path(self) -> str | None: ...

    @property
    def raw_paths(self) -> Mapping[str, str]: ...


@dataclass(eq=False, slots=True)
class ItemRep:
    """A representation of an item, compiled during one pass.

    Compared and hashed by identity: two reps with the same item and name
    are still distinct compilation units.

    Attributes:
        item: The item this rep belongs to.
        name: Representation name.
        raw_paths: Output path per snapshot name.  The ``last`` snapshot is
            the rep's primary output.
        binary: True if the compiled content is binary (never diffed).
        compiled: Set once the compiler has produced this rep's content.

    """

    DEFAULT_SNAPSHOT: ClassVar[str] = "last"

    item: Item
    name: str = "default"
    raw_paths: dict[str, str] = field(default_factory=dict)
    binary: bool = False
    compiled: bool = False

    @property
    def raw_path(self) -> str | None:
        """Output path of the primary snapshot, if it is written at all."""
        return self.raw_paths.get(self.DEFAULT_SNAPSHOT)

    def __repr__(self) -> str:
        return f"<ItemRep name={self.name!r} item.identifier={self.item.identifier!r}>"
