"""
Typed records for the compliance catalog.

Every record converts to and from the camelCase JSON documents the catalog
is stored in. Optional fields that are empty are left out of the output so
that a load/save cycle reproduces the source documents.

Enum-typed fields are coerced tolerantly: a value that is not a known member
is kept as the raw string so the document still loads and the value can be
reported by validation. A field of the wrong JSON type (an array where a
string belongs, a string where an array belongs) is never coerced: from_dict
raises ValueError naming the field.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union, Any


class JurisdictionType(Enum):
    """Kinds of legal jurisdiction."""
    COUNTRY = "country"
    REGION = "region"
    SUPRANATIONAL = "supranational"


class RegulationStatus(Enum):
    """Lifecycle status of a regulation."""
    DRAFT = "draft"
    ADOPTED = "adopted"
    ENFORCEABLE = "enforceable"
    SUPERSEDED = "superseded"


class RequirementSeverity(Enum):
    """Severity of a requirement."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SolutionType(Enum):
    """Types of cloud solution."""
    COMMERCIAL = "commercial"
    GOVCLOUD = "govcloud"
    SOVEREIGN = "sovereign"
    NATIONAL_PARTNER = "national-partner"
    PRIVATE = "private"


class ComplianceZone(Enum):
    """Compliance posture of a solution within a jurisdiction."""
    RED = "red"        # Full sovereignty required
    YELLOW = "yellow"  # Trustee/partner model acceptable
    GREEN = "green"    # Commercial cloud acceptable with controls


class ComplianceLevel(Enum):
    """Compliance status of a requirement-solution pair."""
    COMPLIANT = "compliant"
    PARTIAL = "partial"
    NON_COMPLIANT = "non-compliant"
    CONDITIONAL = "conditional"
    BANNED = "banned"


class EnforcementLikelihood(Enum):
    """Likelihood of enforcement action."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNCERTAIN = "uncertain"


class ExternalRefType(Enum):
    """Kinds of external reference."""
    URL = "url"
    CITATION = "citation"
    REGULATION = "regulation"
    STANDARD = "standard"


# An enum member, or the raw string when the value is not a known member.
Level = Union[ComplianceLevel, str]
Zone = Union[ComplianceZone, str]


def coerce_enum(enum_cls: type, value: Any) -> Any:
    """Return the member of enum_cls for value, or value unchanged if unknown.

    Empty values become None.

    Raises:
        ValueError: If value is neither a member nor a string
    """
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected a string for {enum_cls.__name__}, got {_json_type(value)}")
    try:
        return enum_cls(value)
    except ValueError:
        return value


def enum_value(value: Any) -> Any:
    """Return the JSON value of an enum member or pass-through string."""
    if isinstance(value, Enum):
        return value.value
    return value


def _compact(data: dict, required: tuple = ()) -> dict:
    """Drop empty optional keys; keys listed in required are always kept."""
    return {
        key: value for key, value in data.items()
        if key in required or value not in (None, "", [], {})
    }


def _text(value: Any) -> str:
    """JSON value for a required enum field that may be unset."""
    value = enum_value(value)
    return "" if value is None else value


def _json_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return "null" if value is None else type(value).__name__


# Typed field readers. A missing or null field reads as empty; a value of the
# wrong JSON type raises ValueError naming the field.

def get_string(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected a string, got {_json_type(value)}")
    return value


def get_strings(data: dict, key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key}: expected an array of strings, got {_json_type(value)}")
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{key}: expected an array of strings, found {_json_type(item)}")
    return list(value)


def get_enum(data: dict, key: str, enum_cls: type) -> Any:
    try:
        return coerce_enum(enum_cls, data.get(key))
    except ValueError as e:
        raise ValueError(f"{key}: {e}") from e


def get_number(data: dict, key: str, default: float = 0.0) -> float:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key}: expected a number, got {_json_type(value)}")
    return value


def get_bool(data: dict, key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key}: expected a boolean, got {_json_type(value)}")
    return value


def get_record(data: dict, key: str, record_type: type) -> Any:
    """Nested object parsed with record_type.from_dict, or None when absent or empty."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValueError(f"{key}: expected an object, got {_json_type(value)}")
    if not value:
        return None
    try:
        return record_type.from_dict(value)
    except ValueError as e:
        raise ValueError(f"{key}.{e}") from e


def get_records(data: dict, key: str, record_type: type) -> list:
    """Nested array of objects, each parsed with record_type.from_dict."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{key}: expected an array of objects, got {_json_type(value)}")
    records = []
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise ValueError(f"{key}[{index}]: expected an object, got {_json_type(item)}")
        try:
            records.append(record_type.from_dict(item))
        except ValueError as e:
            raise ValueError(f"{key}[{index}].{e}") from e
    return records


@dataclass
class ExternalRef:
    """Reference to an external resource."""

    type: Optional[Union[ExternalRefType, str]] = None
    value: str = ""
    name: str = ""
    notes: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "ExternalRef":
        return cls(
            type=get_enum(data, "type", ExternalRefType),
            value=get_string(data, "value"),
            name=get_string(data, "name"),
            notes=get_string(data, "notes"),
        )

    def to_dict(self) -> dict:
        return _compact({
            'type': _text(self.type),
            'value': self.value,
            'name': self.name,
            'notes': self.notes,
        }, required=('type', 'value'))


@dataclass
class Jurisdiction:
    """A legal jurisdiction (country, region, or supranational body)."""

    id: str
    name: str = ""
    type: Optional[Union[JurisdictionType, str]] = None
    iso3166: str = ""
    parent_id: str = ""  # e.g. "DE" -> "EU"
    member_ids: list[str] = field(default_factory=list)
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Jurisdiction":
        return cls(
            id=get_string(data, "id"),
            name=get_string(data, "name"),
            type=get_enum(data, "type", JurisdictionType),
            iso3166=get_string(data, "iso3166"),
            parent_id=get_string(data, "parentId"),
            member_ids=get_strings(data, "memberIds"),
            description=get_string(data, "description"),
        )

    def to_dict(self) -> dict:
        return _compact({
            'id': self.id,
            'name': self.name,
            'type': _text(self.type),
            'iso3166': self.iso3166,
            'parentId': self.parent_id,
            'memberIds': self.member_ids,
            'description': self.description,
        }, required=('id', 'name', 'type'))


@dataclass
class Section:
    """A section or article within a regulation."""

    id: str
    regulation_id: str = ""
    number: str = ""  # e.g. "Article 21"
    name: str = ""
    description: str = ""
    parent_id: str = ""
    requirement_ids: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Section":
        return cls(
            id=get_string(data, "id"),
            regulation_id=get_string(data, "regulationId"),
            number=get_string(data, "number"),
            name=get_string(data, "name"),
            description=get_string(data, "description"),
            parent_id=get_string(data, "parentId"),
            requirement_ids=get_strings(data, "requirementIds"),
        )

    def to_dict(self) -> dict:
        return _compact({
            'id': self.id,
            'regulationId': self.regulation_id,
            'number': self.number,
            'name': self.name,
            'description': self.description,
            'parentId': self.parent_id,
            'requirementIds': self.requirement_ids,
        }, required=('id', 'regulationId', 'number', 'name'))


@dataclass
class RegulatedEntity:
    """A type of organization subject to a regulation."""

    id: str
    name: str = ""
    description: str = ""
    regulation_id: str = ""
    sectors: list[str] = field(default_factory=list)
    criteria: str = ""
    examples: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "RegulatedEntity":
        return cls(
            id=get_string(data, "id"),
            name=get_string(data, "name"),
            description=get_string(data, "description"),
            regulation_id=get_string(data, "regulationId"),
            sectors=get_strings(data, "sectors"),
            criteria=get_string(data, "criteria"),
            examples=get_strings(data, "examples"),
        )

    def to_dict(self) -> dict:
        return _compact({
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'regulationId': self.regulation_id,
            'sectors': self.sectors,
            'criteria': self.criteria,
            'examples': self.examples,
        }, required=('id', 'name', 'description', 'regulationId'))


@dataclass
class Regulation:
    """A compliance regulation or directive."""

    id: str
    name: str = ""
    short_name: str = ""  # e.g. "NIS2", "GDPR", "DORA"
    description: str = ""
    jurisdiction_id: str = ""
    status: Optional[Union[RegulationStatus, str]] = None
    adopted_date: str = ""
    effective_date: str = ""
    enforcement_date: str = ""
    official_url: str = ""
    sections: list[Section] = field(default_factory=list)
    regulated_entities: list[RegulatedEntity] = field(default_factory=list)
    external_refs: list[ExternalRef] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Regulation":
        return cls(
            id=get_string(data, "id"),
            name=get_string(data, "name"),
            short_name=get_string(data, "shortName"),
            description=get_string(data, "description"),
            jurisdiction_id=get_string(data, "jurisdictionId"),
            status=get_enum(data, "status", RegulationStatus),
            adopted_date=get_string(data, "adoptedDate"),
            effective_date=get_string(data, "effectiveDate"),
            enforcement_date=get_string(data, "enforcementDate"),
            official_url=get_string(data, "officialUrl"),
            sections=get_records(data, "sections", Section),
            regulated_entities=get_records(data, "regulatedEntities", RegulatedEntity),
            external_refs=get_records(data, "externalRefs", ExternalRef),
            tags=get_strings(data, "tags"),
        )

    def to_dict(self) -> dict:
        return _compact({
            'id': self.id,
            'name': self.name,
            'shortName': self.short_name,
            'description': self.description,
            'jurisdictionId': self.jurisdiction_id,
            'status': _text(self.status),
            'adoptedDate': self.adopted_date,
            'effectiveDate': self.effective_date,
            'enforcementDate': self.enforcement_date,
            'officialUrl': self.official_url,
            'sections': [s.to_dict() for s in self.sections],
            'regulatedEntities': [e.to_dict() for e in self.regulated_entities],
            'externalRefs': [r.to_dict() for r in self.external_refs],
            'tags': self.tags,
        }, required=('id', 'name', 'shortName', 'description', 'jurisdictionId', 'status'))


@dataclass
class Applicability:
    """When a requirement applies."""

    entity_types: list[str] = field(default_factory=list)
    sectors: list[str] = field(default_factory=list)
    data_types: list[str] = field(default_factory=list)
    conditions: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Applicability":
        return cls(
            entity_types=get_strings(data, "entityTypes"),
            sectors=get_strings(data, "sectors"),
            data_types=get_strings(data, "dataTypes"),
            conditions=get_string(data, "conditions"),
        )

    def to_dict(self) -> dict:
        return _compact({
            'entityTypes': self.entity_types,
            'sectors': self.sectors,
            'dataTypes': self.data_types,
            'conditions': self.conditions,
        })


@dataclass
class Requirement:
    """A specific compliance requirement (control) from a regulation."""

    id: str
    name: str = ""
    description: str = ""
    regulation_id: str = ""
    section_id: str = ""
    category: str = ""  # e.g. "data-residency", "encryption"
    subcategory: str = ""
    severity: Optional[Union[RequirementSeverity, str]] = None
    keywords: list[str] = field(default_factory=list)
    related_ids: list[str] = field(default_factory=list)
    external_refs: list[ExternalRef] = field(default_factory=list)
    effective_date: str = ""
    applicability: Optional[Applicability] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Requirement":
        return cls(
            id=get_string(data, "id"),
            name=get_string(data, "name"),
            description=get_string(data, "description"),
            regulation_id=get_string(data, "regulationId"),
            section_id=get_string(data, "sectionId"),
            category=get_string(data, "category"),
            subcategory=get_string(data, "subcategory"),
            severity=get_enum(data, "severity", RequirementSeverity),
            keywords=get_strings(data, "keywords"),
            related_ids=get_strings(data, "relatedIds"),
            external_refs=get_records(data, "externalRefs", ExternalRef),
            effective_date=get_string(data, "effectiveDate"),
            applicability=get_record(data, "applicability", Applicability),
        )

    def to_dict(self) -> dict:
        return _compact({
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'regulationId': self.regulation_id,
            'sectionId': self.section_id,
            'category': self.category,
            'subcategory': self.subcategory,
            'severity': enum_value(self.severity),
            'keywords': self.keywords,
            'relatedIds': self.related_ids,
            'externalRefs': [r.to_dict() for r in self.external_refs],
            'effectiveDate': self.effective_date,
            'applicability': self.applicability.to_dict() if self.applicability else None,
        }, required=('id', 'name', 'description', 'regulationId'))


@dataclass
class OwnershipStructure:
    """Ownership details relevant to sovereignty rules."""

    eu_ownership_percent: float = 0.0
    largest_non_eu_percent: float = 0.0
    subject_to_extra_territorial_law: bool = False  # CLOUD Act, etc.
    controlling_entity: str = ""
    notes: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "OwnershipStructure":
        return cls(
            eu_ownership_percent=get_number(data, "euOwnershipPercent"),
            largest_non_eu_percent=get_number(data, "largestNonEuPercent"),
            subject_to_extra_territorial_law=get_bool(data, "subjectToExtraTerritorialLaw"),
            controlling_entity=get_string(data, "controllingEntity"),
            notes=get_string(data, "notes"),
        )

    def to_dict(self) -> dict:
        return _compact({
            'euOwnershipPercent': self.eu_ownership_percent,
            'largestNonEuPercent': self.largest_non_eu_percent,
            'subjectToExtraTerritorialLaw': self.subject_to_extra_territorial_law,
            'controllingEntity': self.controlling_entity,
            'notes': self.notes,
        }, required=('euOwnershipPercent', 'largestNonEuPercent', 'subjectToExtraTerritorialLaw'))


@dataclass
class Solution:
    """A cloud solution or service offering."""

    id: str  # e.g. "aws-commercial"
    name: str = ""
    provider: str = ""
    type: Optional[Union[SolutionType, str]] = None
    description: str = ""
    available_regions: list[str] = field(default_factory=list)
    certifications: list[str] = field(default_factory=list)
    ownership_structure: Optional[OwnershipStructure] = None
    jurisdiction_ids: list[str] = field(default_factory=list)  # where available
    external_refs: list[ExternalRef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Solution":
        return cls(
            id=get_string(data, "id"),
            name=get_string(data, "name"),
            provider=get_string(data, "provider"),
            type=get_enum(data, "type", SolutionType),
            description=get_string(data, "description"),
            available_regions=get_strings(data, "availableRegions"),
            certifications=get_strings(data, "certifications"),
            ownership_structure=get_record(data, "ownershipStructure", OwnershipStructure),
            jurisdiction_ids=get_strings(data, "jurisdictionIds"),
            external_refs=get_records(data, "externalRefs", ExternalRef),
        )

    def to_dict(self) -> dict:
        return _compact({
            'id': self.id,
            'name': self.name,
            'provider': self.provider,
            'type': _text(self.type),
            'description': self.description,
            'availableRegions': self.available_regions,
            'certifications': self.certifications,
            'ownershipStructure': (
                self.ownership_structure.to_dict() if self.ownership_structure else None
            ),
            'jurisdictionIds': self.jurisdiction_ids,
            'externalRefs': [r.to_dict() for r in self.external_refs],
        }, required=('id', 'name', 'provider', 'type'))


@dataclass
class ZoneAssignment:
    """Compliance zone of one solution in one jurisdiction."""

    id: str
    solution_id: str = ""
    jurisdiction_id: str = ""
    zone: Optional[Zone] = None
    data_category: str = ""  # e.g. "essential", "personal", "general"
    entity_type: str = ""
    rationale: str = ""
    regulation_ids: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "ZoneAssignment":
        return cls(
            id=get_string(data, "id"),
            solution_id=get_string(data, "solutionId"),
            jurisdiction_id=get_string(data, "jurisdictionId"),
            zone=get_enum(data, "zone", ComplianceZone),
            data_category=get_string(data, "dataCategory"),
            entity_type=get_string(data, "entityType"),
            rationale=get_string(data, "rationale"),
            regulation_ids=get_strings(data, "regulationIds"),
        )

    def to_dict(self) -> dict:
        return _compact({
            'id': self.id,
            'solutionId': self.solution_id,
            'jurisdictionId': self.jurisdiction_id,
            'zone': _text(self.zone),
            'dataCategory': self.data_category,
            'entityType': self.entity_type,
            'rationale': self.rationale,
            'regulationIds': self.regulation_ids,
        }, required=('id', 'solutionId', 'jurisdictionId', 'zone'))


@dataclass
class RequirementMapping:
    """Compliance status of a requirement-solution pair.

    An empty jurisdiction_ids list means the mapping applies everywhere.
    """

    id: str
    requirement_id: str = ""
    solution_id: str = ""
    jurisdiction_ids: list[str] = field(default_factory=list)
    compliance_level: Optional[Level] = None
    zone: Optional[Zone] = None
    notes: str = ""
    evidence: list[str] = field(default_factory=list)
    conditions: str = ""  # what is needed for compliance
    eta: str = ""  # expected availability, e.g. "Q4 2026"
    assessment_date: str = ""

    def applies_to(self, jurisdiction_id: str) -> bool:
        """Whether this mapping is in scope for the given jurisdiction."""
        return not self.jurisdiction_ids or jurisdiction_id in self.jurisdiction_ids

    @classmethod
    def from_dict(cls, data: dict) -> "RequirementMapping":
        return cls(
            id=get_string(data, "id"),
            requirement_id=get_string(data, "requirementId"),
            solution_id=get_string(data, "solutionId"),
            jurisdiction_ids=get_strings(data, "jurisdictionIds"),
            compliance_level=get_enum(data, "complianceLevel", ComplianceLevel),
            zone=get_enum(data, "zone", ComplianceZone),
            notes=get_string(data, "notes"),
            evidence=get_strings(data, "evidence"),
            conditions=get_string(data, "conditions"),
            eta=get_string(data, "eta"),
            assessment_date=get_string(data, "assessmentDate"),
        )

    def to_dict(self) -> dict:
        return _compact({
            'id': self.id,
            'requirementId': self.requirement_id,
            'solutionId': self.solution_id,
            'jurisdictionIds': self.jurisdiction_ids,
            'complianceLevel': _text(self.compliance_level),
            'zone': enum_value(self.zone),
            'notes': self.notes,
            'evidence': self.evidence,
            'conditions': self.conditions,
            'eta': self.eta,
            'assessmentDate': self.assessment_date,
        }, required=('id', 'requirementId', 'solutionId', 'complianceLevel'))


@dataclass
class EnforcementAction:
    """An enforcement action that has occurred."""

    date: str = ""
    entity: str = ""
    description: str = ""
    penalty: str = ""
    source: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "EnforcementAction":
        return cls(
            date=get_string(data, "date"),
            entity=get_string(data, "entity"),
            description=get_string(data, "description"),
            penalty=get_string(data, "penalty"),
            source=get_string(data, "source"),
        )

    def to_dict(self) -> dict:
        return _compact({
            'date': self.date,
            'entity': self.entity,
            'description': self.description,
            'penalty': self.penalty,
            'source': self.source,
        }, required=('date', 'entity', 'description'))


@dataclass
class EnforcementAssessment:
    """Likelihood and nature of enforcement in a jurisdiction."""

    id: str
    jurisdiction_id: str = ""
    likelihood: Optional[Union[EnforcementLikelihood, str]] = None
    requirement_id: str = ""
    regulation_id: str = ""
    rationale: str = ""
    recent_actions: list[EnforcementAction] = field(default_factory=list)
    regulatory_trends: str = ""
    assessment_date: str = ""
    assessor: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "EnforcementAssessment":
        return cls(
            id=get_string(data, "id"),
            jurisdiction_id=get_string(data, "jurisdictionId"),
            likelihood=get_enum(data, "likelihood", EnforcementLikelihood),
            requirement_id=get_string(data, "requirementId"),
            regulation_id=get_string(data, "regulationId"),
            rationale=get_string(data, "rationale"),
            recent_actions=get_records(data, "recentActions", EnforcementAction),
            regulatory_trends=get_string(data, "regulatoryTrends"),
            assessment_date=get_string(data, "assessmentDate"),
            assessor=get_string(data, "assessor"),
        )

    def to_dict(self) -> dict:
        return _compact({
            'id': self.id,
            'requirementId': self.requirement_id,
            'regulationId': self.regulation_id,
            'jurisdictionId': self.jurisdiction_id,
            'likelihood': _text(self.likelihood),
            'rationale': self.rationale,
            'recentActions': [a.to_dict() for a in self.recent_actions],
            'regulatoryTrends': self.regulatory_trends,
            'assessmentDate': self.assessment_date,
            'assessor': self.assessor,
        }, required=('id', 'jurisdictionId', 'likelihood', 'rationale', 'assessmentDate'))
