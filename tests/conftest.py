"""Shared builders for apidelta tests."""

import pytest

from apidelta import (
    APISnapshot, CallGraphEdge, CallGraphNode, DeprecationInfo, ExportedSymbol,
    ModuleAPISnapshot, ParameterSchema, SymbolSchema, TypeSchema, build_call_graph
)


def ref(name):
    """Schema ref used for symbols and call graph nodes in tests."""
    return f"#/definitions/{name}"


def parse_param(text):
    """Parse ``"name: type"``, ``"name?: type"`` or ``"name: type = default"``."""
    default = None
    if "=" in text:
        text, default = (part.strip() for part in text.split("=", 1))
    name, _, type_text = text.partition(":")
    name = name.strip()
    optional = name.endswith("?")
    return ParameterSchema(
        name=name.rstrip("?"),
        type=TypeSchema(raw=type_text.strip()) if type_text.strip() else None,
        optional=optional,
        default_value=default
    )


@pytest.fixture
def function_export():
    """Factory for a resolvable function export.

    Example:
        function_export("fetch", params=["url: string", "retries?: number"], returns="string")
    """
    def _make(name, params=(), returns=None, deprecated=False, description="",
              summary=None, signature=None, resolvable=True):
        if not resolvable:
            return ExportedSymbol(name=name)
        symbol = SymbolSchema(
            id=ref(name),
            name=name,
            kind="function",
            signature=signature if signature is not None else f"function {name}()",
            description=description,
            summary=summary,
            parameters=tuple(parse_param(p) if isinstance(p, str) else p for p in params),
            return_type=TypeSchema(raw=returns) if returns is not None else None,
            deprecated=DeprecationInfo(message="deprecated") if deprecated else None
        )
        return ExportedSymbol(name=name, symbol=symbol)
    return _make


@pytest.fixture
def make_snapshot():
    """Factory for snapshots from ``{module_path: [exports]}`` mappings."""
    def _make(snapshot_id, modules=None, tag=None):
        module_snapshots = tuple(
            ModuleAPISnapshot(path=path, exports=tuple(exports), hash=f"hash-{path}")
            for path, exports in (modules or {}).items()
        )
        return APISnapshot(
            id=snapshot_id,
            created_at="2024-01-15T10:30:00Z",
            workspace_uri="file:///workspace",
            modules=module_snapshots,
            tag=tag
        )
    return _make


@pytest.fixture
def make_call_graph():
    """Factory for call graphs from ``(caller, callee)`` name pairs.

    Names are turned into schema refs; ``modules`` maps names to module paths.
    """
    def _make(edges=(), nodes=(), modules=None):
        modules = modules or {}
        names = list(nodes)
        for caller, callee in edges:
            for name in (caller, callee):
                if name not in names:
                    names.append(name)
        graph_nodes = [
            CallGraphNode(id=ref(name), symbol=name, module=modules.get(name, ""))
            for name in names
        ]
        graph_edges = [CallGraphEdge(source=ref(caller), target=ref(callee)) for caller, callee in edges]
        return build_call_graph(graph_nodes, graph_edges)
    return _make
