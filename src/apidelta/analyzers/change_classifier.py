"""Change Classifier - Classifies matched exports into typed API changes."""

from typing import List, Optional, Sequence

from ..core.changes import Change, ChangeDetail, ChangeKind, DetailKind, TypeRelation
from ..core.snapshot import ExportedSymbol, ParameterSchema, SymbolSchema, TypeSchema
from ..logging_config import get_logger
from .symbol_matcher import MatchStatus, ModuleMatch, SymbolMatch
from .type_relation import INPUT, OUTPUT, HeuristicTypeComparator, TypeComparator, is_type_safe

logger = get_logger(__name__)

_PARAMETER_TYPE_DETAILS = {
    TypeRelation.WIDENED: DetailKind.PARAMETER_TYPE_WIDENED,
    TypeRelation.NARROWED: DetailKind.PARAMETER_TYPE_NARROWED,
    TypeRelation.UNRELATED: DetailKind.PARAMETER_TYPE_CHANGED,
}

_RETURN_TYPE_DETAILS = {
    TypeRelation.WIDENED: DetailKind.RETURN_TYPE_WIDENED,
    TypeRelation.NARROWED: DetailKind.RETURN_TYPE_NARROWED,
    TypeRelation.UNRELATED: DetailKind.RETURN_TYPE_CHANGED,
}


def symbol_ref_for(module_path: str, name: str, *exports: Optional[ExportedSymbol]) -> str:
    """Schema ref of the first resolvable export, else ``module_path#name``."""
    for export in exports:
        if export is not None and export.symbol is not None:
            return export.symbol.id
    return f"{module_path}#{name}"


def _type_text(schema: Optional[TypeSchema]) -> Optional[str]:
    return schema.raw if schema is not None else None


class ChangeClassifier:
    """Classifies symbol matches and decides which changes are breaking.

    Whether a type change breaks callers is decided by ``is_type_safe`` for
    the slot's position: parameters may widen, return types may narrow.
    """

    def __init__(self, comparator: Optional[TypeComparator] = None):
        self.comparator = comparator or HeuristicTypeComparator()

    def classify_modules(self, module_matches: Sequence[ModuleMatch]) -> List[Change]:
        """Classify all matches, keeping module then export-name order."""
        changes = []
        for module_match in module_matches:
            for match in module_match.matches:
                change = self.classify(match)
                if change is not None:
                    changes.append(change)
        return changes

    def classify(self, match: SymbolMatch) -> Optional[Change]:
        """Classify a single match. Returns None when nothing relevant changed."""
        if match.status == MatchStatus.ADDED:
            return self._classify_addition(match)
        elif match.status == MatchStatus.REMOVED:
            return self._classify_removal(match)
        else:
            return self._classify_matched(match)

    def _classify_addition(self, match: SymbolMatch) -> Change:
        return Change(
            kind=ChangeKind.ADDED,
            module_path=match.module_path,
            symbol_name=match.name,
            symbol_ref=symbol_ref_for(match.module_path, match.name, match.after),
            breaking=False,
            details=(ChangeDetail(DetailKind.EXPORT_ADDED, breaking=False),),
            after=match.after.symbol if match.after else None
        )

    def _classify_removal(self, match: SymbolMatch) -> Change:
        return Change(
            kind=ChangeKind.REMOVED,
            module_path=match.module_path,
            symbol_name=match.name,
            symbol_ref=symbol_ref_for(match.module_path, match.name, match.before),
            breaking=True,
            details=(ChangeDetail(DetailKind.EXPORT_REMOVED, breaking=True),),
            before=match.before.symbol if match.before else None
        )

    def _classify_matched(self, match: SymbolMatch) -> Optional[Change]:
        before = match.before.symbol if match.before else None
        after = match.after.symbol if match.after else None

        if before is None or after is None:
            logger.debug("Skipping %s#%s: signature not resolvable", match.module_path, match.name)
            return None

        details = self.compare_symbols(before, after)
        if not details:
            return None

        deprecated = any(detail.kind == DetailKind.DEPRECATED for detail in details)
        return Change(
            kind=ChangeKind.DEPRECATED if deprecated else ChangeKind.MODIFIED,
            module_path=match.module_path,
            symbol_name=match.name,
            symbol_ref=symbol_ref_for(match.module_path, match.name, match.after, match.before),
            breaking=any(detail.breaking for detail in details),
            details=tuple(details),
            before=before,
            after=after
        )

    def compare_symbols(self, before: SymbolSchema, after: SymbolSchema) -> List[ChangeDetail]:
        """Signature-level differences between two versions of a symbol.

        Documentation fields (description, summary, examples, signature text)
        are ignored.
        """
        details = self._compare_parameters(before.parameters, after.parameters)
        details.extend(self._compare_return_type(before.return_type, after.return_type))

        if not before.is_deprecated and after.is_deprecated:
            details.append(ChangeDetail(DetailKind.DEPRECATED, breaking=False))

        return details

    def _compare_parameters(self, before: Sequence[ParameterSchema],
                            after: Sequence[ParameterSchema]) -> List[ChangeDetail]:
        """Compare parameter lists.

        Parameters are paired by name. A shared parameter whose rank among
        the shared parameters changed is reordered. Unpaired parameters at
        the same position on both sides are a rename; any other unpaired
        parameter was added or removed.
        """
        old_by_name = {param.name: param for param in before}
        new_names = {param.name for param in after}
        shared_order = [param.name for param in before if param.name in new_names]
        unpaired_old = {
            position: param for position, param in enumerate(before) if param.name not in new_names
        }
        # A parameter inserted before a kept one shifts it at positional call sites
        last_kept = max(
            (position for position, param in enumerate(after) if param.name in old_by_name), default=-1
        )

        details = []
        seen = set()
        for position, new in enumerate(after):
            old = old_by_name.get(new.name)

            if old is not None and new.name not in seen:
                previous = shared_order[len(seen)]
                seen.add(new.name)
                if previous != new.name:
                    # Call sites are positional
                    details.append(ChangeDetail(
                        DetailKind.PARAMETER_REORDERED,
                        breaking=True,
                        parameter=new.name,
                        position=position,
                        before=previous,
                        after=new.name
                    ))
                details.extend(self._compare_parameter(old, new, position))
            elif position in unpaired_old:
                old = unpaired_old.pop(position)
                details.append(ChangeDetail(
                    DetailKind.PARAMETER_RENAMED,
                    breaking=False,
                    parameter=new.name,
                    position=position,
                    before=old.name,
                    after=new.name
                ))
                details.extend(self._compare_parameter(old, new, position))
            else:
                details.append(ChangeDetail(
                    DetailKind.PARAMETER_ADDED,
                    breaking=new.required or position < last_kept,
                    parameter=new.name,
                    position=position,
                    after=_type_text(new.type)
                ))

        for position, param in unpaired_old.items():
            details.append(ChangeDetail(
                DetailKind.PARAMETER_REMOVED,
                breaking=True,
                parameter=param.name,
                position=position,
                before=_type_text(param.type)
            ))

        return details

    def _compare_parameter(self, old: ParameterSchema, new: ParameterSchema,
                           position: int) -> List[ChangeDetail]:
        """Type and optionality changes of one parameter."""
        details = []
        relation = self.comparator.compare(old.type, new.type)

        if relation != TypeRelation.SAME:
            details.append(ChangeDetail(
                _PARAMETER_TYPE_DETAILS[relation],
                breaking=not is_type_safe(relation, INPUT),
                parameter=new.name,
                position=position,
                before=_type_text(old.type),
                after=_type_text(new.type),
                relation=relation
            ))

        if old.required and not new.required:
            details.append(ChangeDetail(
                DetailKind.PARAMETER_MADE_OPTIONAL, breaking=False,
                parameter=new.name, position=position
            ))
        elif not old.required and new.required:
            details.append(ChangeDetail(
                DetailKind.PARAMETER_MADE_REQUIRED, breaking=True,
                parameter=new.name, position=position
            ))

        return details

    def _compare_return_type(self, old: Optional[TypeSchema],
                             new: Optional[TypeSchema]) -> List[ChangeDetail]:
        relation = self.comparator.compare(old, new)
        if relation == TypeRelation.SAME:
            return []

        return [ChangeDetail(
            _RETURN_TYPE_DETAILS[relation],
            breaking=not is_type_safe(relation, OUTPUT),
            before=_type_text(old),
            after=_type_text(new),
            relation=relation
        )]
