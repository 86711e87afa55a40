"""Section registry — which property fields each reviewable section governs.

Pure data. The order of sections is significant: the submission history is
appended in registry order, and the missing-field comment lists fields in
the order the section declares them.
"""

from __future__ import annotations

from dataclasses import dataclass

from sectionreview_core.errors import UnknownSectionError

# Fields holding several document URLs rather than a single value.
LIST_FIELDS = frozenset({"doc_renovation_files"})

FIELD_LABELS: dict[str, str] = {
    # Documents
    "doc_purchase_contract": "Contrato de compraventa de la propiedad",
    "doc_land_registry_note": "Nota Simple de la propiedad",
    "property_management_plan_contract_url": "Contrato Property Management",
    "doc_energy_cert": "Certificado de eficiencia energética",
    "doc_renovation_files": "Documentos de la reforma",
    "home_insurance_policy_url": "Póliza del Seguro de Hogar",
    "client_bank_certificate_url": "Certificado de titularidad bancaria",
    "doc_contract_electricity": "Contrato Electricidad",
    "doc_contract_water": "Contrato Agua",
    "doc_contract_gas": "Contrato Gas",
    "doc_bill_electricity": "Factura Electricidad",
    "doc_bill_water": "Factura Agua",
    "doc_bill_gas": "Factura Gas",
    # Text / choice fields
    "admin_name": "Administrador de la propiedad",
    "keys_location": "Localización de las llaves",
    "client_iban": "Cuenta bancaria del propietario (IBAN)",
    "home_insurance_type": "Tipo de seguro de hogar",
    "property_management_plan": "Plan de Property Management",
    "property_manager": "Property Manager asignado",
}


@dataclass(frozen=True)
class Section:
    """A fixed, named group of property fields reviewed with one yes/no answer."""

    id: str
    title: str
    fields: tuple[str, ...]


DEFAULT_SECTIONS: tuple[Section, ...] = (
    Section(
        "property-management-info",
        "Información de Gestión de la Propiedad",
        ("admin_name", "keys_location"),
    ),
    Section(
        "technical-documents",
        "Documentos Técnicos de la Propiedad",
        ("doc_energy_cert", "doc_renovation_files"),
    ),
    Section(
        "legal-documents",
        "Documentos Legales de la Propiedad",
        ("doc_purchase_contract", "doc_land_registry_note"),
    ),
    Section(
        "client-financial-info",
        "Información Financiera del Cliente",
        ("client_iban", "client_bank_certificate_url"),
    ),
    Section(
        "supplies-contracts",
        "Contratos de Suministros",
        ("doc_contract_electricity", "doc_contract_water", "doc_contract_gas"),
    ),
    Section(
        "supplies-bills",
        "Facturas de Suministros",
        ("doc_bill_electricity", "doc_bill_water", "doc_bill_gas"),
    ),
    Section(
        "home-insurance",
        "Seguro de Hogar",
        ("home_insurance_type", "home_insurance_policy_url"),
    ),
    Section(
        "property-management",
        "Gestión de Propiedad (Property Management)",
        ("property_management_plan", "property_management_plan_contract_url", "property_manager"),
    ),
)


class SectionRegistry:
    """Ordered, read-only lookup table of sections and field labels."""

    def __init__(self, sections: tuple[Section, ...] | list[Section], labels: dict[str, str] | None = None):
        self._sections = tuple(sections)
        self._by_id = {s.id: s for s in self._sections}
        if len(self._by_id) != len(self._sections):
            raise ValueError("Section ids must be unique.")
        self._labels = dict(FIELD_LABELS if labels is None else labels)
        self._field_owner: dict[str, str] = {}
        for section in self._sections:
            for name in section.fields:
                self._field_owner.setdefault(name, section.id)

    def __iter__(self):
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    def __contains__(self, section_id: object) -> bool:
        return section_id in self._by_id

    @property
    def ids(self) -> list[str]:
        return [s.id for s in self._sections]

    def get(self, section_id: str) -> Section:
        try:
            return self._by_id[section_id]
        except KeyError:
            raise UnknownSectionError(section_id) from None

    def label(self, field_name: str) -> str:
        return self._labels.get(field_name, field_name)

    def section_for_field(self, field_name: str) -> str | None:
        return self._field_owner.get(field_name)


DEFAULT_REGISTRY = SectionRegistry(DEFAULT_SECTIONS)


def build_registry(config: dict | None = None) -> SectionRegistry:
    """Build a registry from the ``sections`` / ``field_labels`` config keys.

    Falls back to the built-in "Viviendas Prophero" sections when the config
    does not define any. Custom labels are layered over the built-in ones.
    """
    config = config or {}
    raw_sections = config.get("sections")
    labels = {**FIELD_LABELS, **(config.get("field_labels") or {})}

    if not raw_sections:
        return SectionRegistry(DEFAULT_SECTIONS, labels=labels)

    sections = []
    for raw in raw_sections:
        if not isinstance(raw, dict) or not raw.get("id"):
            raise ValueError(f"Invalid section definition: {raw!r}")
        sections.append(
            Section(
                id=raw["id"],
                title=raw.get("title") or raw["id"],
                fields=tuple(raw.get("fields") or ()),
            )
        )
    return SectionRegistry(sections, labels=labels)
