"""Snapshot model - immutable records of a workspace's exported API."""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class TypeSchema:
    """A type as written in source plus its normalized form.

    ``kind`` and ``members`` are filled in by extractors that understand the
    type structure (e.g. a union's member types). Comparators use them when
    present and fall back to ``resolved``/``raw`` strings otherwise.
    """
    raw: str
    resolved: Optional[str] = None
    kind: Optional[str] = None  # primitive, reference, union, array, ...
    members: Tuple["TypeSchema", ...] = ()

    @property
    def normalized(self) -> str:
        text = self.resolved if self.resolved else self.raw
        return " ".join(text.split())


@dataclass(frozen=True)
class ParameterSchema:
    """A positional parameter of a callable symbol."""
    name: str
    type: Optional[TypeSchema] = None
    optional: bool = False
    description: Optional[str] = None
    default_value: Optional[str] = None

    @property
    def required(self) -> bool:
        return not self.optional and self.default_value is None


@dataclass(frozen=True)
class DeprecationInfo:
    """Deprecation marker attached to a symbol."""
    message: Optional[str] = None
    since: Optional[str] = None
    replacement: Optional[str] = None


@dataclass(frozen=True)
class SymbolSchema:
    """Full signature record of an exported symbol."""
    id: str
    name: str
    kind: str = "function"
    signature: str = ""
    description: str = ""
    summary: Optional[str] = None
    examples: Tuple[str, ...] = ()
    parameters: Tuple[ParameterSchema, ...] = ()
    return_type: Optional[TypeSchema] = None
    deprecated: Optional[DeprecationInfo] = None

    @property
    def is_deprecated(self) -> bool:
        return self.deprecated is not None


@dataclass(frozen=True)
class ExportInfo:
    """How a symbol is exported from its module."""
    is_default: bool = False
    is_type_only: bool = False


@dataclass(frozen=True)
class ExportedSymbol:
    """An export of a module. ``symbol`` is None when it could not be resolved."""
    name: str
    export_info: ExportInfo = field(default_factory=ExportInfo)
    symbol: Optional[SymbolSchema] = None


@dataclass(frozen=True)
class ModuleAPISnapshot:
    """Public API of a single module."""
    path: str
    exports: Tuple[ExportedSymbol, ...] = ()
    hash: str = ""

    def __post_init__(self):
        names = [export.name for export in self.exports]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate export names in module {self.path}")


@dataclass(frozen=True)
class SnapshotStatistics:
    """Aggregate counts over a snapshot."""
    total_modules: int = 0
    total_exports: int = 0
    documented_exports: int = 0

    @classmethod
    def from_modules(cls, modules: Iterable[ModuleAPISnapshot]) -> "SnapshotStatistics":
        modules = list(modules)
        exports = [export for module in modules for export in module.exports]
        documented = sum(
            1 for export in exports
            if export.symbol is not None and export.symbol.description.strip()
        )
        return cls(
            total_modules=len(modules),
            total_exports=len(exports),
            documented_exports=documented
        )


@dataclass(frozen=True)
class APISnapshot:
    """Point-in-time capture of a workspace's exported API."""
    id: str
    created_at: str
    workspace_uri: str
    modules: Tuple[ModuleAPISnapshot, ...] = ()
    tag: Optional[str] = None
    statistics: Optional[SnapshotStatistics] = None

    def __post_init__(self):
        paths = [module.path for module in self.modules]
        if len(paths) != len(set(paths)):
            raise ValueError(f"Duplicate module paths in snapshot {self.id}")
        if self.statistics is None:
            object.__setattr__(self, "statistics", SnapshotStatistics.from_modules(self.modules))

    @classmethod
    def empty(cls, snapshot_id: str = "empty", workspace_uri: str = "") -> "APISnapshot":
        return cls(id=snapshot_id, created_at="", workspace_uri=workspace_uri)
