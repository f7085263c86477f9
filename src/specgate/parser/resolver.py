"""Resolve ``$ref`` JSON Reference pointers in API definitions.

Definitions commonly use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition.  This module
performs a recursive deep-copy traversal of a definition, replacing every
``$ref`` with the object it points to.

Unlike a strict resolver, problems are *recorded* rather than raised, using
the same wording a conformance checker reports them with:

* a local pointer whose target does not exist yields ``"<ref> is missing"``
  and is replaced by an empty object;
* a remote reference (file-relative path or ``http(s)`` URL) that cannot be
  loaded yields ``"Unable to load RELATIVE ref: <ref> (<reason>)"`` and is
  left in place.

Remote targets are fetched through :func:`~specgate.parser.loader.fetch_text`
with a bounded timeout and cached per resolver, so each URL or file is loaded
at most once. Local pointers inside a remote document resolve against that
remote document.

Circular references are detected via a ``seen`` set and left unresolved to
prevent infinite recursion.  This means a schema that references itself (common
in tree-like structures) will retain its ``$ref`` dict at the cycle point.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional
from urllib.parse import unquote, urljoin

from specgate.error_codes import IS_MISSING_MSG, REFERENCE_KEY
from specgate.exceptions import RemoteReferenceError, SpecParseError
from specgate.parser.loader import fetch_text, is_url, parse_content


@dataclass(frozen=True)
class _Scope:
    """The document a pointer is evaluated against, and where it came from."""

    root: Any
    base: Optional[str]


class RefResolver:
    """Stateful ``$ref`` resolver collecting parser-style messages.

    Args:
        base_uri: Directory or URL that relative remote references are
            resolved against. ``None`` means relative references cannot be
            loaded (e.g. a definition passed as literal text).
        fetch_remote: When ``False`` every remote reference fails to load.
        timeout: Seconds allowed per remote fetch.
        inline_local: Replace local pointers by their targets. When
            ``False`` local pointers are only checked for existence.
    """

    def __init__(
        self,
        base_uri: Optional[str] = None,
        fetch_remote: bool = True,
        timeout: float = 30.0,
        inline_local: bool = True,
    ) -> None:
        self.base_uri = base_uri
        self.fetch_remote = fetch_remote
        self.timeout = timeout
        self.inline_local = inline_local
        self.messages: list[str] = []
        self.remote_failed = False
        self._cache: dict[str, Any] = {}

    def resolve(self, spec: dict[str, Any]) -> dict[str, Any]:
        """Return a resolved deep copy of *spec*; problems land in :attr:`messages`."""
        root = copy.deepcopy(spec)
        return self._deep_resolve(root, _Scope(root, self.base_uri), frozenset())

    def load_remote_references(self, spec: dict[str, Any]) -> None:
        """Load every remote reference of *spec* without resolving anything.

        Raises:
            RemoteReferenceError: For the first remote reference that cannot
                be loaded.
        """
        for ref in iter_ref_strings(spec):
            if ref.startswith("#"):
                continue
            location, _, _ = ref.partition("#")
            self._load(ref, location, self.base_uri)

    # ------------------------------------------------------------------ #
    # Traversal
    # ------------------------------------------------------------------ #

    def _deep_resolve(self, obj: Any, scope: _Scope, seen: frozenset[str]) -> Any:
        if isinstance(obj, dict):
            ref = obj.get(REFERENCE_KEY)
            if isinstance(ref, str):
                if ref.startswith("#"):
                    return self._resolve_local(obj, ref, scope, seen)
                return self._resolve_remote(obj, ref, scope, seen)
            return {key: self._deep_resolve(value, scope, seen) for key, value in obj.items()}

        if isinstance(obj, list):
            return [self._deep_resolve(item, scope, seen) for item in obj]

        return obj

    def _resolve_local(
        self, obj: dict[str, Any], ref: str, scope: _Scope, seen: frozenset[str]
    ) -> Any:
        key = f"{scope.base}{ref}"
        if key in seen:
            return obj
        try:
            target = resolve_pointer(ref[1:], scope.root)
        except SpecParseError:
            self.messages.append(f"{ref} {IS_MISSING_MSG}")
            return {} if self.inline_local else obj
        if not self.inline_local:
            return obj
        return self._deep_resolve(target, scope, seen | {key})

    def _resolve_remote(
        self, obj: dict[str, Any], ref: str, scope: _Scope, seen: frozenset[str]
    ) -> Any:
        location, _, fragment = ref.partition("#")
        try:
            absolute, remote_root = self._load(ref, location, scope.base)
        except RemoteReferenceError as exc:
            self.messages.append(str(exc))
            self.remote_failed = True
            return obj

        key = f"{absolute}#{fragment}"
        if key in seen:
            return obj
        try:
            target = resolve_pointer(fragment, remote_root)
        except SpecParseError:
            self.messages.append(f"{ref} {IS_MISSING_MSG}")
            return {}
        remote_scope = _Scope(remote_root, _parent(absolute))
        return self._deep_resolve(target, remote_scope, seen | {key})

    def _load(self, ref: str, location: str, base: Optional[str]) -> tuple[str, Any]:
        if not self.fetch_remote:
            raise RemoteReferenceError(ref, "remote references are disabled")
        absolute = _absolute_location(location, base)
        if absolute is None:
            raise RemoteReferenceError(ref, "no base location to resolve against")
        if absolute not in self._cache:
            try:
                self._cache[absolute] = parse_content(fetch_text(absolute, self.timeout))
            except SpecParseError as exc:
                raise RemoteReferenceError(ref, str(exc)) from exc
        return absolute, self._cache[absolute]


def resolve_pointer(pointer: str, root: Any) -> Any:  # noqa: ANN401
    """Evaluate a JSON Pointer (without the leading ``#``) against *root*.

    Handles RFC 6901 escaping (``~0`` for ``~``, ``~1`` for ``/``) and
    percent-encoded segments.

    Raises:
        SpecParseError: If any segment does not exist.
    """
    if pointer in ("", "/"):
        return root
    if not pointer.startswith("/"):
        raise SpecParseError(f"Invalid JSON pointer '{pointer}'")

    current: Any = root
    for raw_segment in pointer[1:].split("/"):
        segment = unquote(raw_segment).replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve pointer '{pointer}': key '{segment}' not found"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve pointer '{pointer}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve pointer '{pointer}': "
                f"cannot navigate into {type(current).__name__}"
            )
    return current


def iter_ref_strings(node: Any) -> Iterator[str]:
    """Yield every string ``$ref`` value in *node*, depth-first."""
    if isinstance(node, dict):
        for key, value in node.items():
            if key == REFERENCE_KEY and isinstance(value, str):
                yield value
            else:
                yield from iter_ref_strings(value)
    elif isinstance(node, list):
        for item in node:
            yield from iter_ref_strings(item)


def _absolute_location(location: str, base: Optional[str]) -> Optional[str]:
    if is_url(location):
        return location
    if Path(location).is_absolute():
        return location
    if base is None:
        return None
    if is_url(base):
        return urljoin(base, location)
    return str((Path(base) / location).resolve())


def _parent(absolute: str) -> str:
    # urljoin against the document URL itself already drops the last segment
    if is_url(absolute):
        return absolute
    return str(Path(absolute).parent)
