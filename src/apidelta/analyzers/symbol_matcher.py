"""Symbol Matcher - pairs exported symbols between two snapshots."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..core.changes import ModuleStatus
from ..core.snapshot import APISnapshot, ExportedSymbol, ModuleAPISnapshot
from ..logging_config import get_logger

logger = get_logger(__name__)


class MatchStatus(Enum):
    """Outcome of matching one export name."""
    ADDED = "added"
    REMOVED = "removed"
    MATCHED = "matched"


@dataclass(frozen=True)
class SymbolMatch:
    """An export name with its old and new export, if any."""
    status: MatchStatus
    module_path: str
    name: str
    before: Optional[ExportedSymbol] = None
    after: Optional[ExportedSymbol] = None


@dataclass(frozen=True)
class ModuleMatch:
    """All symbol matches of one module path."""
    module_path: str
    status: ModuleStatus
    matches: Tuple[SymbolMatch, ...]
    had_exports: bool = False


class SymbolMatcher:
    """Matches exports purely by (module path, export name).

    A renamed export therefore shows up as one removal plus one addition.
    """

    def match(self, from_snapshot: APISnapshot, to_snapshot: APISnapshot) -> List[ModuleMatch]:
        """Match every module path present in either snapshot.

        Modules are visited in ``from_snapshot`` order followed by modules that
        only exist in ``to_snapshot``; within a module matches are sorted by
        export name.
        """
        from_modules = {module.path: module for module in from_snapshot.modules}
        to_modules = {module.path: module for module in to_snapshot.modules}

        paths = list(from_modules)
        paths.extend(path for path in to_modules if path not in from_modules)

        results = []
        for path in paths:
            before = from_modules.get(path)
            after = to_modules.get(path)

            if after is None:
                status = ModuleStatus.REMOVED
                logger.debug("Module %s removed", path)
            elif before is None:
                status = ModuleStatus.ADDED
                logger.debug("Module %s added", path)
            else:
                status = ModuleStatus.CHANGED

            results.append(ModuleMatch(
                module_path=path,
                status=status,
                matches=tuple(self._match_exports(path, before, after)),
                had_exports=bool(before and before.exports)
            ))

        return results

    def _match_exports(self, path: str, before: Optional[ModuleAPISnapshot],
                       after: Optional[ModuleAPISnapshot]) -> List[SymbolMatch]:
        before_map = self._export_map(before)
        after_map = self._export_map(after)

        matches = []
        for name in sorted(set(before_map) | set(after_map)):
            old = before_map.get(name)
            new = after_map.get(name)
            if new is None:
                status = MatchStatus.REMOVED
            elif old is None:
                status = MatchStatus.ADDED
            else:
                status = MatchStatus.MATCHED
            matches.append(SymbolMatch(status, path, name, old, new))

        return matches

    def _export_map(self, module: Optional[ModuleAPISnapshot]) -> Dict[str, ExportedSymbol]:
        if module is None:
            return {}
        return {export.name: export for export in module.exports}
