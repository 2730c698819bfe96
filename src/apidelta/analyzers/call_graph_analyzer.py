"""Call graph model and assembly."""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Set

import networkx as nx

from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CallGraphNode:
    """A callable symbol in the call graph, keyed by its symbol reference."""
    id: str
    symbol: str = ""
    module: str = ""
    is_entry_point: bool = False
    is_leaf: bool = False


@dataclass(frozen=True)
class CallGraphEdge:
    """``source`` calls ``target``."""
    source: str
    target: str
    call_count: int = 1
    is_recursive: bool = False


@dataclass
class CallGraph:
    """Read-only view over a directed call graph.

    An edge ``a -> b`` means ``a`` calls ``b``, so the callers of a node are
    its predecessors. Neighbour order follows edge insertion order.
    """
    graph: nx.DiGraph = field(default_factory=nx.DiGraph)
    nodes: Dict[str, CallGraphNode] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "CallGraph":
        return cls()

    def __contains__(self, ref: str) -> bool:
        return ref in self.nodes or ref in self.graph

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def callers(self, ref: str) -> List[str]:
        if ref not in self.graph:
            return []
        return list(self.graph.predecessors(ref))

    def callees(self, ref: str) -> List[str]:
        if ref not in self.graph:
            return []
        return list(self.graph.successors(ref))

    def edges(self) -> List[CallGraphEdge]:
        return [
            data.get("edge") or CallGraphEdge(source, target)
            for source, target, data in self.graph.edges(data=True)
        ]

    def node(self, ref: str) -> Optional[CallGraphNode]:
        return self.nodes.get(ref)

    def find_node(self, ref: Optional[str], module: str = "", symbol: str = "") -> Optional[str]:
        """Resolve a node id by reference, then ``module#symbol``, then (module, symbol)."""
        if ref and ref in self:
            return ref

        if module and symbol:
            node_id = create_node_id(module, symbol)
            if node_id in self:
                return node_id
            for node in self.nodes.values():
                if node.module == module and node.symbol == symbol:
                    return node.id

        return None

    def module_of(self, ref: str) -> Optional[str]:
        """Module path of a node, falling back to the ``module#symbol`` id format."""
        node = self.nodes.get(ref)
        if node is not None and node.module:
            return node.module
        if "#" in ref and not ref.startswith("#"):
            return ref.split("#", 1)[0]
        return None


def create_node_id(module_path: str, symbol_name: str, parent_name: Optional[str] = None) -> str:
    """Create a node id for a callable symbol."""
    if parent_name:
        return f"{module_path}#{parent_name}.{symbol_name}"
    return f"{module_path}#{symbol_name}"


class CallGraphAnalyzer:
    """Assembles call graphs from externally extracted nodes and edges."""

    def __init__(self):
        self.graph = nx.DiGraph()
        self.nodes: Dict[str, CallGraphNode] = {}

    def build_graph(self, nodes: Iterable[CallGraphNode],
                    edges: Iterable[CallGraphEdge]) -> CallGraph:
        """Build a call graph.

        Edge endpoints without a node get a placeholder node. Repeated edges
        are merged by summing their call counts. Entry point and leaf flags
        are derived from the edges, and edges inside a cycle (including
        self calls) are marked recursive.
        """
        # Clear existing graph
        self.graph = nx.DiGraph()
        self.nodes = {}

        for node in nodes:
            self.nodes[node.id] = node
            self.graph.add_node(node.id)

        for edge in edges:
            for ref in (edge.source, edge.target):
                if ref not in self.nodes:
                    self.nodes[ref] = self._placeholder_node(ref)
                    self.graph.add_node(ref)

            if self.graph.has_edge(edge.source, edge.target):
                existing = self.graph.edges[edge.source, edge.target]["edge"]
                edge = replace(edge, call_count=existing.call_count + edge.call_count)
            self.graph.add_edge(edge.source, edge.target, edge=edge)

        recursive = self._recursive_edges()
        for source, target, data in self.graph.edges(data=True):
            data["edge"] = replace(data["edge"], is_recursive=(source, target) in recursive)

        for ref, node in list(self.nodes.items()):
            external_callers = [caller for caller in self.graph.predecessors(ref) if caller != ref]
            self.nodes[ref] = replace(
                node,
                is_entry_point=node.is_entry_point or not external_callers,
                is_leaf=self.graph.out_degree(ref) == 0
            )

        logger.debug("Built call graph with %d nodes and %d edges",
                     self.graph.number_of_nodes(), self.graph.number_of_edges())

        return CallGraph(graph=self.graph, nodes=dict(self.nodes))

    def get_call_hierarchy(self, call_graph: CallGraph, ref: str) -> Dict:
        """Get the call hierarchy for a given symbol."""
        if ref not in call_graph:
            return {"symbol": ref, "callers": [], "callees": [], "call_count": 0}

        callers = call_graph.callers(ref)
        callees = call_graph.callees(ref)

        return {
            "symbol": ref,
            "callers": callers,
            "callees": callees,
            "call_count": len(callers) + len(callees)
        }

    def _recursive_edges(self) -> Set[tuple]:
        recursive = set()
        for component in nx.strongly_connected_components(self.graph):
            if len(component) > 1:
                for source in component:
                    for target in self.graph.successors(source):
                        if target in component:
                            recursive.add((source, target))
        for source, target in nx.selfloop_edges(self.graph):
            recursive.add((source, target))
        return recursive

    def _placeholder_node(self, ref: str) -> CallGraphNode:
        if "#" in ref and not ref.startswith("#"):
            module, _, symbol = ref.partition("#")
            return CallGraphNode(id=ref, symbol=symbol, module=module)
        return CallGraphNode(id=ref, symbol=ref.rsplit("/", 1)[-1])


def build_call_graph(nodes: Iterable[CallGraphNode], edges: Iterable[CallGraphEdge]) -> CallGraph:
    """Assemble a :class:`CallGraph` from node and edge records."""
    return CallGraphAnalyzer().build_graph(nodes, edges)
