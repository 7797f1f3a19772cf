"""Asset trie: the hierarchical namespace over a flat set of asset names.

Names such as ``data/img/a.png`` are split on ``/``; every proper prefix
becomes a synthesized directory node and the full name becomes a leaf
holding an :class:`~petrify.models.AssetRecord`.  For example, building
from ``data/foo.txt``, ``data/img/a.png`` and ``data/img/b.png`` gives::

    ""            -> ["data"]
    "data"        -> ["foo.txt", "img"]
    "data/img"    -> ["a.png", "b.png"]
    "data/foo.txt" is a leaf, listing it raises AssetNotADirectoryError

The trie is built in one pass and never mutated afterwards, so a built
instance may be shared by any number of readers without locking.  Child
maps are kept sorted by name so listings and generated output are stable.
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import MappingProxyType
from typing import (
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
)

from .errors import (
    E_DUPLICATE_ASSET,
    E_INVALID_NAME,
    E_PATH_CONFLICT,
    AssetNotFoundError,
    DuplicateAssetError,
    InvalidAssetNameError,
    PathConflictError,
    not_a_directory,
    not_found,
)
from .logging import get_logger
from .models import AssetInfo, AssetRecord, FileInfo, Timestamp, to_datetime

__all__ = [
    "Accessor",
    "MetadataProvider",
    "TrieNode",
    "AssetTrie",
    "split_name",
]

Accessor = Callable[[str], bytes]
MetadataProvider = Callable[[str], AssetInfo]

_log = get_logger("trie")


def split_name(name: str) -> List[str]:
    """Validate a canonical asset name and return its segments.

    Backslashes are accepted as separators.  Empty names, leading or
    trailing slashes and empty, ``.`` or ``..`` segments are rejected.
    """
    canonical = name.replace("\\", "/") if isinstance(name, str) else name
    if not isinstance(canonical, str) or not canonical:
        raise InvalidAssetNameError(
            code=E_INVALID_NAME,
            message="Asset name must be a non-empty string",
            context={"name": name},
        )
    if canonical.startswith("/") or canonical.endswith("/"):
        raise InvalidAssetNameError(
            code=E_INVALID_NAME,
            message=f"Asset name {name!r} must not start or end with '/'",
            context={"name": name},
        )
    segments = canonical.split("/")
    for segment in segments:
        if segment in ("", ".", ".."):
            raise InvalidAssetNameError(
                code=E_INVALID_NAME,
                message=f"Asset name {name!r} has an invalid segment {segment!r}",
                context={"name": name, "segment": segment},
            )
    return segments


def _lookup_segments(path: str) -> List[str]:
    canonical = path.replace("\\", "/")
    if not canonical:
        return []
    return canonical.split("/")


class TrieNode:
    """A leaf (``asset`` set, no children) or a synthesized directory."""

    __slots__ = ("name", "asset", "_children")

    def __init__(self, name: str = "", asset: Optional[AssetRecord] = None):
        self.name = name
        self.asset = asset
        self._children: Mapping[str, TrieNode] = {}

    @property
    def is_leaf(self) -> bool:
        return self.asset is not None

    @property
    def is_dir(self) -> bool:
        return self.asset is None

    @property
    def children(self) -> Mapping[str, "TrieNode"]:
        return self._children

    def child(self, name: str) -> Optional["TrieNode"]:
        return self._children.get(name)

    def _freeze(self) -> None:
        """Sort and seal every child map below this node.

        Iterative, so name depth is not bounded by the recursion limit.
        """
        stack = [self]
        while stack:
            node = stack.pop()
            children = node._children
            ordered = {k: children[k] for k in sorted(children)}
            node._children = MappingProxyType(ordered)
            stack.extend(ordered.values())

    def __repr__(self) -> str:  # pragma: no cover
        kind = "leaf" if self.is_leaf else f"dir[{len(self._children)}]"
        return f"TrieNode({self.name!r}, {kind})"


def _insert(root: TrieNode, segments: List[str], record: AssetRecord) -> None:
    node = root
    for depth, segment in enumerate(segments[:-1]):
        children: Dict[str, TrieNode] = node._children  # type: ignore[assignment]
        child = children.get(segment)
        if child is None:
            child = children[segment] = TrieNode(segment)
        elif child.is_leaf:
            owner = "/".join(segments[: depth + 1])
            raise PathConflictError(
                code=E_PATH_CONFLICT,
                message=f"Asset {record.name} would nest under asset {owner}",
                context={"name": record.name, "conflict": owner},
            )
        node = child
    children = node._children  # type: ignore[assignment]
    existing = children.get(segments[-1])
    if existing is not None:
        if existing.is_leaf:
            raise DuplicateAssetError(
                code=E_DUPLICATE_ASSET,
                message=f"Asset {record.name} inserted twice",
                context={"name": record.name},
            )
        raise PathConflictError(
            code=E_PATH_CONFLICT,
            message=f"Asset {record.name} collides with a directory of the same name",
            context={"name": record.name, "conflict": record.name},
        )
    children[segments[-1]] = TrieNode(segments[-1], record)


class AssetTrie:
    """Immutable namespace of assets; see the module docstring."""

    def __init__(
        self,
        root: TrieNode,
        accessor: Optional[Accessor] = None,
        *,
        default_mod_time: datetime,
        asset_count: int = 0,
    ):
        self._root = root
        self._accessor = accessor
        self._default_mod_time = default_mod_time
        self._asset_count = asset_count

    @classmethod
    def build(
        cls,
        names: Iterable[str],
        accessor: Optional[Accessor] = None,
        *,
        metadata: Optional[MetadataProvider] = None,
        contents: Optional[Mapping[str, bytes]] = None,
        default_mod_time: Optional[Timestamp] = None,
    ) -> "AssetTrie":
        """Build a trie from canonical names in a single pass.

        Args:
            names: Canonical asset names.
            accessor: Fetches content for names not present in ``contents``.
            metadata: Optional provider of size/mode/mod_time per name.
            contents: Resident content keyed by name.
            default_mod_time: Timestamp for assets without one; defaults to
                the construction time, captured once.

        Raises:
            DuplicateAssetError: A name was given twice.
            PathConflictError: A name needs an existing asset as a directory,
                or an asset would replace a directory.
            InvalidAssetNameError: A name is empty or malformed.
            ValueError: An asset has no content source.
        """
        if default_mod_time is None:
            default = datetime.now(timezone.utc)
        else:
            default = to_datetime(default_mod_time)
        root = TrieNode("")
        count = 0
        for name in names:
            segments = split_name(name)
            canonical = "/".join(segments)
            record = _make_record(
                name, canonical, accessor, metadata, contents, default
            )
            _insert(root, segments, record)
            count += 1
        root._freeze()
        trie = cls(root, accessor, default_mod_time=default, asset_count=count)
        _log.debug("Built asset trie: assets=%d", count)
        return trie

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, bytes],
        *,
        default_mod_time: Optional[Timestamp] = None,
    ) -> "AssetTrie":
        """Build a trie whose content is fully resident."""
        return cls.build(
            mapping.keys(), contents=mapping, default_mod_time=default_mod_time
        )

    @property
    def root(self) -> TrieNode:
        return self._root

    @property
    def default_mod_time(self) -> datetime:
        return self._default_mod_time

    def __len__(self) -> int:
        return self._asset_count

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        try:
            self.lookup(path)
        except AssetNotFoundError:
            return False
        return True

    def lookup(self, path: str) -> TrieNode:
        """Resolve ``path`` to its node; ``""`` is the root directory."""
        node = self._root
        for segment in _lookup_segments(path):
            node = node.child(segment)  # type: ignore[assignment]
            if node is None:
                raise not_found(path)
        return node

    def list_children(self, path: str) -> Tuple[FileInfo, ...]:
        """Immediate children of the directory at ``path``, sorted by name.

        Listing entries always report size 0 and no timestamp.
        """
        node = self.lookup(path)
        if node.is_leaf:
            raise not_a_directory(path)
        return tuple(
            FileInfo(name=name, is_dir=child.is_dir)
            for name, child in node.children.items()
        )

    def content(self, record: AssetRecord) -> bytes:
        """Return the bytes of ``record``, through the accessor if needed.

        Accessor failures propagate unchanged.
        """
        if record.content is not None:
            return record.content
        if self._accessor is None:  # pragma: no cover - rejected by build
            raise not_found(record.name)
        return self._accessor(record.name)

    def walk(self, path: str = "") -> Iterator[Tuple[str, TrieNode]]:
        """Yield ``(path, node)`` depth-first in name order, ``path`` first."""
        start = self.lookup(path)
        stack = [(path.replace("\\", "/"), start)]
        while stack:
            current, node = stack.pop()
            yield current, node
            for name in reversed(list(node.children)):
                child_path = f"{current}/{name}" if current else name
                stack.append((child_path, node.children[name]))

    def names(self) -> List[str]:
        return sorted(path for path, node in self.walk() if node.is_leaf)


def _make_record(
    name: str,
    canonical: str,
    accessor: Optional[Accessor],
    metadata: Optional[MetadataProvider],
    contents: Optional[Mapping[str, bytes]],
    default_mod_time: datetime,
) -> AssetRecord:
    content = None
    if contents is not None:
        content = contents.get(name)
        if content is None:
            content = contents.get(canonical)
    if content is None and accessor is None:
        raise ValueError(f"No content source for asset {canonical}")
    info = None
    if metadata is not None:
        try:
            info = metadata(canonical)
        except AssetNotFoundError:
            info = None
    if info is None:
        return AssetRecord(
            name=canonical,
            content=None if content is None else bytes(content),
            mod_time=default_mod_time,
        )
    return AssetRecord(
        name=canonical,
        content=None if content is None else bytes(content),
        mod_time=(
            to_datetime(info.mod_time)
            if info.mod_time is not None
            else default_mod_time
        ),
        mode=info.mode,
        declared_size=info.size,
    )
