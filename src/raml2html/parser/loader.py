"""RAML loader with position tracking for rich error reporting."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq, TaggedScalar
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarbool import ScalarBoolean

from raml2html.models.errors import ParserError, Position

logger = logging.getLogger("raml2html.parser")

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters
_MAX_NODE_COUNT = 50_000
_MAX_DEPTH = 64
_MAX_INCLUDE_DEPTH = 10

_HEADER_RE = re.compile(r"^#%RAML[ \t]+(?P<version>\S+)(?:[ \t]+(?P<kind>\S+))?[ \t]*$")

# Included files with these suffixes are parsed as YAML; anything else is
# inlined verbatim (JSON schemas, XSD, markdown, examples).
_YAML_SUFFIXES = frozenset({".raml", ".yaml", ".yml"})

EXTENSION_KINDS = frozenset({"Overlay", "Extension"})


class DocumentSafetyError(Exception):
    """Raised when RAML input violates size or complexity limits."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        super().__init__(message)


@dataclass(frozen=True)
class SourceLocation:
    file: str
    position: Position


@dataclass
class SourceMap:
    """Maps dotted key paths to their source positions for error reporting."""

    _positions: dict[str, SourceLocation] = field(default_factory=dict)

    def add(self, path: str, location: SourceLocation) -> None:
        self._positions[path] = location

    def get(self, path: str) -> SourceLocation | None:
        return self._positions.get(path)

    def merge(self, other: SourceMap) -> None:
        self._positions.update(other._positions)

    @property
    def paths(self) -> list[str]:
        return list(self._positions.keys())

    def locate(self, path: str) -> SourceLocation | None:
        """Return the location of ``path`` or of its closest recorded ancestor."""
        while path:
            location = self._positions.get(path)
            if location is not None:
                return location
            path = path.rpartition(".")[0]
        return None

    def error(
        self,
        code: str,
        message: str,
        key_path: str,
        *,
        default_file: str | None = None,
        is_warning: bool = False,
    ) -> ParserError:
        """Build a diagnostic anchored at the source position of ``key_path``."""
        location = self.locate(key_path)
        if location is None:
            return ParserError.at(
                code, message, default_file, Position(line=1, column=1), is_warning=is_warning
            )
        return ParserError.at(
            code, message, location.file, location.position, is_warning=is_warning
        )


@dataclass
class LoadedDocument:
    """A loaded RAML file: plain data, source positions and loader diagnostics."""

    path: Path
    file: str
    kind: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    source_map: SourceMap = field(default_factory=SourceMap)
    errors: list[ParserError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not any(not e.is_warning for e in self.errors)


@dataclass
class _Context:
    file: str
    directory: Path
    root_dir: Path
    stack: tuple[Path, ...]
    source_map: SourceMap
    errors: list[ParserError]


class RamlLoader:
    """RAML 1.0 loader that tracks source positions for error reporting.

    Uses ruamel.yaml which preserves line/column info on every parsed node.
    ``!include`` tags are resolved relative to the including file.
    """

    def __init__(
        self,
        max_document_size: int = _MAX_DOCUMENT_SIZE,
        max_include_depth: int = _MAX_INCLUDE_DEPTH,
    ) -> None:
        self._max_document_size = max_document_size
        self._max_include_depth = max_include_depth

    @staticmethod
    def _new_yaml() -> YAML:
        yaml = YAML()
        yaml.preserve_quotes = True
        return yaml

    # -- safety checks -------------------------------------------------------

    def _check_document_size(self, content: str) -> None:
        if len(content) > self._max_document_size:
            raise DocumentSafetyError(
                "DOCUMENT_TOO_LARGE",
                f"RAML document exceeds maximum size "
                f"({len(content):,} chars > {self._max_document_size:,} limit)",
            )

    @staticmethod
    def _check_complexity(
        data: Any, node_limit: int = _MAX_NODE_COUNT, depth_limit: int = _MAX_DEPTH
    ) -> None:
        """Reject parsed documents with too many nodes or too deep a nesting."""
        count = 0
        stack: list[tuple[Any, int]] = [(data, 0)]
        while stack:
            node, depth = stack.pop()
            count += 1
            if count > node_limit:
                raise DocumentSafetyError(
                    "DOCUMENT_TOO_COMPLEX",
                    f"RAML document exceeds maximum node count ({node_limit:,})",
                )
            if depth > depth_limit:
                raise DocumentSafetyError(
                    "DOCUMENT_TOO_COMPLEX",
                    f"RAML document exceeds maximum nesting depth ({depth_limit})",
                )
            if isinstance(node, dict):
                stack.extend((v, depth + 1) for v in node.values())
            elif isinstance(node, list):
                stack.extend((v, depth + 1) for v in node)

    # -- public loading API --------------------------------------------------

    def load(self, path: Path, root_dir: Path | None = None) -> LoadedDocument:
        """Load a RAML root or extension document.

        Diagnostics are collected on the returned document instead of being
        raised; ``LoadedDocument.ok`` is False if any of them is an error.
        """
        path = Path(path)
        root_dir = root_dir if root_dir is not None else path.parent
        doc = LoadedDocument(path=path, file=_relative(path, root_dir))

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            doc.errors.append(
                ParserError.at("FILE_NOT_FOUND", f"Cannot read '{path}': {_read_error(exc)}", doc.file)
            )
            return doc

        header_error = self._check_header(content, doc)
        if header_error is not None:
            doc.errors.append(header_error)
            return doc

        ctx = _Context(
            file=doc.file,
            directory=path.parent,
            root_dir=root_dir,
            stack=(path.resolve(),),
            source_map=doc.source_map,
            errors=doc.errors,
        )
        data = self._parse(content, ctx, prefix="")
        if isinstance(data, dict):
            doc.data = data
        elif data is not None:
            doc.errors.append(
                ParserError.at(
                    "INVALID_ROOT",
                    "RAML document root must be a mapping",
                    doc.file,
                    Position(line=2, column=1),
                )
            )
        logger.debug("Loaded %s (%d diagnostics)", path, len(doc.errors))
        return doc

    def load_api(
        self, path: Path, extensions: list[Path] | tuple[Path, ...] = ()
    ) -> LoadedDocument:
        """Load an API root and apply extension / overlay documents in order."""
        path = Path(path)
        master = self.load(path)
        if master.kind is not None and master.ok:
            master.errors.append(
                ParserError.at(
                    "INVALID_ROOT_KIND",
                    f"Expected an API root document, got a RAML {master.kind}",
                    master.file,
                    Position(line=1, column=1),
                )
            )
        for ext_path in extensions:
            ext = self.load(Path(ext_path), root_dir=path.parent)
            master.errors.extend(ext.errors)
            if not ext.ok:
                continue
            if ext.kind not in EXTENSION_KINDS:
                master.errors.append(
                    ParserError.at(
                        "INVALID_EXTENSION_HEADER",
                        "Extension documents must start with '#%RAML 1.0 Overlay' "
                        "or '#%RAML 1.0 Extension'",
                        ext.file,
                        Position(line=1, column=1),
                    )
                )
                continue
            if "extends" not in ext.data:
                master.errors.append(
                    ext.source_map.error(
                        "MISSING_EXTENDS",
                        f"RAML {ext.kind} must declare the document it 'extends'",
                        "extends",
                        default_file=ext.file,
                    )
                )
                continue
            merge_documents(master.data, ext.data)
            master.source_map.merge(ext.source_map)
        return master

    # -- internals -----------------------------------------------------------

    @staticmethod
    def _check_header(content: str, doc: LoadedDocument) -> ParserError | None:
        first_line = content.split("\n", 1)[0].rstrip("\r")
        match = _HEADER_RE.match(first_line)
        if match is None:
            return ParserError.at(
                "MISSING_RAML_HEADER",
                "Document must start with the '#%RAML 1.0' header",
                doc.file,
                Position(line=1, column=1),
            )
        if match.group("version") != "1.0":
            return ParserError.at(
                "UNSUPPORTED_RAML_VERSION",
                f"Unsupported RAML version '{match.group('version')}', only 1.0 is supported",
                doc.file,
                Position(line=1, column=1),
            )
        doc.kind = match.group("kind")
        return None

    def _parse(self, content: str, ctx: _Context, prefix: str) -> Any:
        try:
            self._check_document_size(content)
            node = self._new_yaml().load(content)
            self._check_complexity(node)
        except DocumentSafetyError as exc:
            ctx.errors.append(ParserError.at(exc.code, str(exc), ctx.file))
            return None
        except YAMLError as exc:
            ctx.errors.append(_yaml_error(exc, ctx.file))
            return None
        if node is None:
            return {}
        return self._walk(node, ctx, prefix, None)

    def _walk(self, node: Any, ctx: _Context, prefix: str, site: Position | None) -> Any:
        """Record source positions, resolve includes and convert to plain Python."""
        if isinstance(node, CommentedMap):
            out: dict[str, Any] = {}
            for key in node:
                key_path = f"{prefix}.{key}" if prefix else str(key)
                key_pos = _lc_position(node, "key", key)
                if key_pos is not None:
                    ctx.source_map.add(key_path, SourceLocation(ctx.file, key_pos))
                value_site = _lc_position(node, "value", key) or key_pos
                out[str(key)] = self._walk(node[key], ctx, key_path, value_site)
            return out
        if isinstance(node, CommentedSeq):
            items: list[Any] = []
            for i, item in enumerate(node):
                item_path = f"{prefix}[{i}]"
                item_pos = _lc_position(node, "item", i)
                if item_pos is not None:
                    ctx.source_map.add(item_path, SourceLocation(ctx.file, item_pos))
                items.append(self._walk(item, ctx, item_path, item_pos or site))
            return items
        if isinstance(node, TaggedScalar):
            if _tag_name(node) == "!include":
                return self._include(str(node.value).strip(), ctx, prefix, site)
            return node.value
        return _plain_scalar(node)

    def _include(self, target: str, ctx: _Context, prefix: str, site: Position | None) -> Any:
        include_path = ctx.directory / target
        resolved = include_path.resolve()
        if resolved in ctx.stack:
            ctx.errors.append(
                ParserError.at("CYCLIC_INCLUDE", f"Cyclic include of '{target}'", ctx.file, site)
            )
            return None
        if len(ctx.stack) > self._max_include_depth:
            ctx.errors.append(
                ParserError.at(
                    "INCLUDE_TOO_DEEP",
                    f"Include of '{target}' exceeds maximum depth ({self._max_include_depth})",
                    ctx.file,
                    site,
                )
            )
            return None
        if not include_path.is_file():
            ctx.errors.append(
                ParserError.at("INCLUDE_ERROR", f"Cannot resolve include '{target}'", ctx.file, site)
            )
            return None

        try:
            content = include_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            ctx.errors.append(
                ParserError.at(
                    "INCLUDE_ERROR",
                    f"Cannot read include '{target}': {_read_error(exc)}",
                    ctx.file,
                    site,
                )
            )
            return None
        if include_path.suffix.lower() not in _YAML_SUFFIXES:
            return content

        child = _Context(
            file=_relative(include_path, ctx.root_dir),
            directory=include_path.parent,
            root_dir=ctx.root_dir,
            stack=ctx.stack + (resolved,),
            source_map=ctx.source_map,
            errors=[],
        )
        value = self._parse(content, child, prefix)
        for inner in child.errors:
            ctx.errors.append(
                ParserError.at(
                    "INCLUDE_ERROR",
                    f"Error in included file '{target}'",
                    ctx.file,
                    site,
                    is_warning=inner.is_warning,
                    trace=[inner],
                )
            )
        return value


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def merge_documents(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge an extension/overlay document onto ``base`` in place.

    Mappings merge key by key; any other value replaces the base value.
    The ``extends`` and ``usage`` keys of the overlay are not carried over.
    """
    for key, value in overlay.items():
        if key in ("extends", "usage"):
            continue
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge_mapping(current, value)
        else:
            base[key] = value
    return base


def _merge_mapping(base: dict[str, Any], overlay: dict[str, Any]) -> None:
    for key, value in overlay.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge_mapping(current, value)
        else:
            base[key] = value


def _relative(path: Path, root_dir: Path) -> str:
    try:
        return Path(os.path.relpath(path, root_dir)).as_posix()
    except ValueError:  # different drives on Windows
        return path.as_posix()


def _read_error(exc: OSError | UnicodeDecodeError) -> str:
    if isinstance(exc, UnicodeDecodeError):
        return f"not valid UTF-8 (byte {exc.start})"
    return exc.strerror or str(exc)


def _lc_position(node: Any, kind: str, key: Any) -> Position | None:
    """Read a 1-based position from ruamel.yaml's line/column info."""
    try:
        pos = getattr(node.lc, kind)(key)
    except (AttributeError, KeyError, TypeError, IndexError):
        return None
    if not pos:
        return None
    line, col = pos
    return Position(line=line + 1, column=col + 1)


def _tag_name(node: TaggedScalar) -> str:
    tag = getattr(node, "tag", None)
    if tag is None:
        return ""
    value = getattr(tag, "value", None)
    return str(value if value is not None else tag)


def _plain_scalar(node: Any) -> Any:
    if isinstance(node, ScalarBoolean):
        return bool(node)
    if isinstance(node, bool) or node is None:
        return node
    if isinstance(node, str):
        return str(node)
    if isinstance(node, int):
        return int(node)
    if isinstance(node, float):
        return float(node)
    return node


def _yaml_error(exc: YAMLError, file: str) -> ParserError:
    mark = getattr(exc, "problem_mark", None) or getattr(exc, "context_mark", None)
    lines = str(exc).strip().splitlines()
    message = getattr(exc, "problem", None) or (lines[0] if lines else type(exc).__name__)
    position = None
    if mark is not None:
        position = Position(line=mark.line + 1, column=mark.column + 1)
    return ParserError.at("YAML_ERROR", str(message), file, position)
