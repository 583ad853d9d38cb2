"""
Reconciliation of research findings with existing mappings.

Each finding is matched to an existing mapping by requirement, solution and
jurisdiction. The finding's jurisdictions are tried in the order listed and
the first hit wins; when none hits, a mapping that applies everywhere (empty
jurisdiction scope) is tried last. Matched mappings are updated from the
finding, unmatched findings become new mappings, and existing mappings no
finding touched are passed through unchanged.

Known limitation: new mapping identifiers are derived from the control and
solution only, so two unmatched findings for the same pair in different
jurisdictions produce the same identifier. They are not disambiguated because
the identifier is externally visible.
"""

import copy
import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from ..catalog.entities import RequirementMapping
from .findings import ResearchFinding

logger = logging.getLogger(__name__)

WILDCARD = "*"


def mapping_key(requirement_id: str, solution_id: str, jurisdiction_id: str) -> str:
    """Lookup key for a (requirement, solution, jurisdiction) triple."""
    return f"{requirement_id}|{solution_id}|{jurisdiction_id}"


@dataclass
class MergeResult:
    """Partition of a merge into new, updated and unchanged mappings."""

    new: list[RequirementMapping] = field(default_factory=list)
    updated: list[RequirementMapping] = field(default_factory=list)
    unchanged: list[RequirementMapping] = field(default_factory=list)

    def combined(self) -> list[RequirementMapping]:
        """All mappings in the order a merged file is written: unchanged, updated, new."""
        return self.unchanged + self.updated + self.new

    def summary(self) -> dict:
        return {
            'new': len(self.new),
            'updated': len(self.updated),
            'unchanged': len(self.unchanged),
            'total': len(self.new) + len(self.updated) + len(self.unchanged),
        }


class MappingReconciler:
    """
    Merges research findings into an existing set of mappings.

    The merge is pure: existing mappings are never modified and every
    returned mapping is a fresh copy, so repeated merges over the same
    inputs give the same partition.
    """

    NEW_ID_PREFIX = "MAP-NEW"

    def merge(
        self,
        findings: list[ResearchFinding],
        existing: list[RequirementMapping],
        assessment_date: str = ""
    ) -> MergeResult:
        """
        Merge findings with existing mappings.

        Every existing mapping ends up in exactly one of updated or
        unchanged. Updated mappings are listed in the order findings first
        matched them; unchanged mappings keep their existing order. When
        several findings match the same existing mapping, the last of them
        determines the updated record.

        Args:
            findings: Research findings in submission order
            existing: Current mappings
            assessment_date: Research date stamped on new and updated mappings

        Returns:
            MergeResult partitioning the output
        """
        index = self._build_index(existing)

        # Position of existing mapping -> updated copy
        updates: dict[int, RequirementMapping] = {}
        new_mappings = []

        for finding in findings:
            position = self._find_match(finding, index)

            if position is None:
                new_mappings.append(self._new_mapping(finding, assessment_date))
                continue

            if position in updates:
                logger.warning(
                    "Mapping %s matched by more than one finding; keeping the last",
                    existing[position].id
                )
            updates[position] = self._updated_mapping(existing[position], finding, assessment_date)

        # Updated mappings keep the order in which findings first matched them
        result = MergeResult(new=new_mappings, updated=list(updates.values()))
        for position, mapping in enumerate(existing):
            if position not in updates:
                result.unchanged.append(copy.deepcopy(mapping))

        self._warn_duplicate_ids(result.new)
        logger.debug("Merge result: %s", result.summary())
        return result

    def _build_index(self, existing: list[RequirementMapping]) -> dict[str, int]:
        """Key every (mapping, jurisdiction) pair; scope-less mappings get the wildcard key."""
        index = {}
        for position, mapping in enumerate(existing):
            for jurisdiction_id in mapping.jurisdiction_ids:
                key = mapping_key(mapping.requirement_id, mapping.solution_id, jurisdiction_id)
                index[key] = position
            if not mapping.jurisdiction_ids:
                key = mapping_key(mapping.requirement_id, mapping.solution_id, WILDCARD)
                index[key] = position
        return index

    def _find_match(self, finding: ResearchFinding, index: dict[str, int]) -> Optional[int]:
        for jurisdiction_id in finding.jurisdiction_ids:
            key = mapping_key(finding.control_id, finding.solution_id, jurisdiction_id)
            if key in index:
                return index[key]
        return index.get(mapping_key(finding.control_id, finding.solution_id, WILDCARD))

    def _updated_mapping(
        self,
        mapping: RequirementMapping,
        finding: ResearchFinding,
        assessment_date: str
    ) -> RequirementMapping:
        return replace(
            copy.deepcopy(mapping),
            compliance_level=finding.compliance_level,
            zone=finding.zone,
            notes=finding.notes,
            evidence=list(finding.evidence),
            eta=finding.eta,
            assessment_date=assessment_date,
        )

    def _new_mapping(self, finding: ResearchFinding, assessment_date: str) -> RequirementMapping:
        return RequirementMapping(
            id=f"{self.NEW_ID_PREFIX}-{finding.control_id}-{finding.solution_id}",
            requirement_id=finding.control_id,
            solution_id=finding.solution_id,
            jurisdiction_ids=list(finding.jurisdiction_ids),
            compliance_level=finding.compliance_level,
            zone=finding.zone,
            notes=finding.notes,
            evidence=list(finding.evidence),
            eta=finding.eta,
            assessment_date=assessment_date,
        )

    def _warn_duplicate_ids(self, mappings: list[RequirementMapping]) -> None:
        seen = set()
        for mapping in mappings:
            if mapping.id in seen:
                logger.warning("Duplicate new mapping identifier: %s", mapping.id)
            seen.add(mapping.id)


def merge_findings(
    findings: list[ResearchFinding],
    existing: list[RequirementMapping],
    assessment_date: str = ""
) -> MergeResult:
    """Merge findings into existing mappings with the default reconciler."""
    return MappingReconciler().merge(findings, existing, assessment_date)
