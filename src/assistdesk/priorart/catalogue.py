"""Static prior-art catalogue for the case/dock patent family.

Holds the four read-only tables the scoring engine works from:

- ``PRIOR_ART_DB``: every prior-art reference, defined once.
- ``ELEMENT_TYPES``: recurring claim-limitation categories.
- ``PRIOR_ART_ELEMENT_COVERAGE``: sparse (reference, element type) -> 0-100
  coverage strength. A missing entry means the reference does not address
  the element.
- ``PATENT_PRIOR_ART_MAP`` / ``PATENT_CLAIM_ELEMENTS``: which references
  apply to which patent, and which element types each claim recites.

All tables keep their authoring order. Scoring ties are resolved by that
order, so reordering entries changes best-reference attribution.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class ReferenceType(str, Enum):
    PATENT = "patent"
    PUBLICATION = "publication"
    PRODUCT = "product"
    STANDARD = "standard"


@dataclass(frozen=True)
class PriorArtReference:
    """One prior-art reference.

    ``base_confidence`` is the analyst's overall impression of the
    reference (0-100). It is informational and not used by the scoring
    formula, which works from the coverage table.
    """
    id: str
    name: str
    citation: str
    type: ReferenceType
    relevance: str
    key_teachings: Tuple[str, ...]
    claim_elements_covered: Tuple[str, ...]
    base_confidence: int
    patent_number: Optional[str] = None
    filing_date: Optional[str] = None
    figures: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ElementType:
    """A claim-limitation category shared across the patent family."""
    id: str
    weight: float
    description: str


def _references(*refs: PriorArtReference) -> Mapping[str, PriorArtReference]:
    return MappingProxyType({ref.id: ref for ref in refs})


def _freeze(table: Dict[str, Dict[str, int]]) -> Mapping[str, Mapping[str, int]]:
    return MappingProxyType({k: MappingProxyType(dict(v)) for k, v in table.items()})


PRIOR_ART_DB: Mapping[str, PriorArtReference] = _references(
    PriorArtReference(
        id="thiers",
        name="Thiers",
        patent_number="9,019,698",
        citation="U.S. Patent No. 9,019,698",
        type=ReferenceType.PATENT,
        filing_date="2012-05-21",
        relevance="Primary reference - protective case with dock interface assembly, "
                  "magnetic coupling, alignment features",
        key_teachings=(
            "Case assembly with front cover and rear cover (Fig. 9)",
            "Dock interface assembly with contacts (Abstract)",
            "Internal wires connecting PCB to connector (10:52-57)",
            "Bumpers at corners for shock protection (9:34-40)",
            "Magnetic coupling between case and dock",
            "Alignment feature for docking (claim 1)",
        ),
        figures=("Fig. 3", "Fig. 5", "Fig. 9"),
        claim_elements_covered=(
            "protective case/cover",
            "panel with exterior surface",
            "skirt surrounding panel",
            "male plug/connector",
            "contactors",
            "female nest",
            "docking system",
            "internal conductors/wires",
        ),
        base_confidence=92,
    ),
    PriorArtReference(
        id="supran-408",
        name="Supran '408",
        patent_number="8,553,408",
        citation="U.S. Patent No. 8,553,408",
        type=ReferenceType.PATENT,
        filing_date="2011-09-06",
        relevance="Protective sleeve with conductive charging, conductive ring contacts, "
                  "indentations for alignment",
        key_teachings=(
            "Form-fitted sleeve for mobile device (7:33-36)",
            "Conductive ring 42 with indentations 41 (14:30-33)",
            "Sleeve provides protection (9:58-67)",
            "Mating connector 27 for docking",
            "Protrusions 47 on base for alignment",
            "Dam/indentation around contacts",
            "Magnetic coupling mechanism for mounting",
            "Indexing members for discrete rotational orientation",
        ),
        figures=("Fig. 10", "Fig. 13", "Fig. 15"),
        claim_elements_covered=(
            "protective sleeve/cover",
            "conductive ring contacts",
            "alignment indentations",
            "docking system",
            "locator dam",
            "magnetic coupling",
            "nesting appendage",
        ),
        base_confidence=90,
    ),
    PriorArtReference(
        id="supran-416",
        name="Supran '416",
        patent_number="9,060,416",
        citation="U.S. Patent No. 9,060,416",
        type=ReferenceType.PATENT,
        filing_date="2011-09-06",
        relevance="Divisional of '408 - conductive charging with CENTRAL magnetic mount "
                  "interface, exposed electrical contacts",
        key_teachings=(
            "Coupling mechanism with magnet for removable coupling (claim 1)",
            "Central magnetic mount - circular mounting with central axis of symmetry (4:24-27)",
            "Exposed electrical contacts for conductive charging (claim 9)",
            "Indexing members/protrusions for discrete rotational alignment (claim 6)",
            "Mounting surface extends along plane parallel to base (claim 1)",
            "Magnet maintains coupling in vertical orientation (claim 4)",
            "Sleeve configured to removably receive mobile device (claim 10)",
        ),
        figures=("Fig. 1", "Fig. 2", "Fig. 3", "Fig. 10"),
        claim_elements_covered=(
            "magnetic coupling",
            "central magnetic mount interface",
            "exposed electrical contacts",
            "docking connector",
            "alignment/indexing features",
            "protective sleeve",
            "nesting appendage",
            "conductive charging",
        ),
        base_confidence=93,
    ),
    PriorArtReference(
        id="hoellwarth-850",
        name="Hoellwarth '850",
        patent_number="9,939,850",
        citation="U.S. Patent No. 9,939,850",
        type=ReferenceType.PATENT,
        filing_date="2015-06-26",
        relevance="Primary for later patents - shell, adapter, male plug, contactors in detail",
        key_teachings=(
            "Shell with skirt surrounding panel (Fig. 4-5)",
            "Adapter positioned within shell (Fig. 9)",
            "Connector 44 with multiple contactors (42:60-43:3)",
            "Second contactors exposed on exterior",
            "Adapter fixedly positioned in skirt",
        ),
        figures=("Fig. 4", "Fig. 5", "Fig. 9"),
        claim_elements_covered=(
            "protective shell/cover",
            "panel and skirt",
            "adapter",
            "male plug",
            "first contactors on plug",
            "second contactors on exterior",
            "female nest/cavity",
        ),
        base_confidence=94,
    ),
    PriorArtReference(
        id="hoellwarth-343",
        name="Hoellwarth '343",
        patent_number="9,595,343",
        citation="U.S. Patent No. 9,595,343",
        type=ReferenceType.PATENT,
        filing_date="2015-03-13",
        relevance="Docking station/base complementary to Hoellwarth '850",
        key_teachings=(
            "Base station for receiving protected device",
            "Docking connector with mating contacts",
            "Alignment features on base",
        ),
        claim_elements_covered=(
            "docking station",
            "docking connector",
            "base with tray",
        ),
        base_confidence=89,
    ),
    PriorArtReference(
        id="kim-781",
        name="Kim-781",
        patent_number="WO 2014/010781",
        citation="WO 2014/010781",
        type=ReferenceType.PUBLICATION,
        filing_date="2013-07-12",
        relevance="Charging apparatus with terminal casing, concentric ring electrodes",
        key_teachings=(
            "Terminal casing 100 for mobile device (Abstract, [11])",
            "Charging mount 200 ([31])",
            "Electrode part 110 on backside",
            "Concentric ring electrodes 111-114",
            "Lead wires 119 connecting electrodes",
        ),
        figures=("Fig. 1", "Fig. 2", "Fig. 3"),
        claim_elements_covered=(
            "protective case/casing",
            "charging mount/dock",
            "ring electrodes/contactors",
            "internal conductors",
        ),
        base_confidence=89,
    ),
    PriorArtReference(
        id="kim-099",
        name="Kim '099",
        patent_number="US 2015/0011099",
        citation="U.S. Pub. No. 2015/0011099",
        type=ReferenceType.PUBLICATION,
        filing_date="2013-07-03",
        relevance="Sliding connector protecting case - flexible case with connector",
        key_teachings=(
            "Protecting case with sliding connector ([0002])",
            "Connector slides to connect to device port ([0009])",
            "Flexible protective case body",
            "Circuit apparatus in case connected via connector",
        ),
        claim_elements_covered=(
            "protective case",
            "sliding connector",
            "male plug",
            "flexible shell",
        ),
        base_confidence=88,
    ),
    PriorArtReference(
        id="rayner-494",
        name="Rayner-494",
        patent_number="9,229,494",
        citation="U.S. Patent No. 9,229,494",
        type=ReferenceType.PATENT,
        filing_date="2013-03-15",
        relevance="Protective housing with alignment features, contactors, waterproof",
        key_teachings=(
            "Housing for protecting device from shock, liquid, dust (Abstract)",
            "Complementary alignment pins and holes (49:5-7)",
            "Recessed contactors for pairing",
            "Housing separate from device, fitted within",
        ),
        figures=("Fig. 16A-F",),
        claim_elements_covered=(
            "protective housing/case",
            "alignment features",
            "contactors",
            "spaced front/back faces",
        ),
        base_confidence=85,
    ),
    PriorArtReference(
        id="wilson",
        name="Wilson",
        patent_number="8,867,209",
        citation="U.S. Patent No. 8,867,209",
        type=ReferenceType.PATENT,
        filing_date="2012-06-28",
        relevance="Protective cover with integrated adapter",
        key_teachings=(
            "Shell with integrated adapter (Fig. 1)",
            "Male plug extending into cavity",
            "Exterior contactors",
        ),
        figures=("Fig. 1",),
        claim_elements_covered=(
            "protective shell",
            "integrated adapter",
            "male plug",
        ),
        base_confidence=86,
    ),
    PriorArtReference(
        id="iport-launchport",
        name="iPort LaunchPort",
        citation="iPort LaunchPort Product (Pre-2014)",
        type=ReferenceType.PRODUCT,
        relevance="Commercial product showing protective case with Lightning plug and "
                  "magnetic charging",
        key_teachings=(
            "Protective case for iPad",
            "Lightning connector integration",
            "Magnetic mounting to wall/base",
            "Charging through case",
        ),
        claim_elements_covered=(
            "protective case",
            "male plug (Lightning)",
            "magnetic coupling",
            "charging dock",
        ),
        base_confidence=83,
    ),
    PriorArtReference(
        id="infinea-tab-m",
        name="Infinea Tab M",
        citation="Infinite Peripherals Infinea Tab M",
        type=ReferenceType.PRODUCT,
        relevance="Commercial iPad case with exposed contactors and connector",
        key_teachings=(
            "Protective case for iPad",
            "Exposed contactors on exterior",
            "Male plug for device connection",
        ),
        claim_elements_covered=(
            "protective case",
            "exposed contactors",
            "male connector",
        ),
        base_confidence=80,
    ),
    PriorArtReference(
        id="duracell-mygrid",
        name="Duracell myGrid",
        citation="Duracell myGrid Charging System (2009)",
        type=ReferenceType.PRODUCT,
        relevance="Power Sleeve with conductive contacts for charging pad - case with "
                  "contacts that interface with dock",
        key_teachings=(
            "Power Sleeve slips over device and acts as protective case",
            "Four small metal contacts on back of sleeve (Gadgeteer review 2009)",
            "Contacts interface with charging pad surface",
            "Conductive charging through case contacts",
            "Multiple device types supported via sleeves",
        ),
        claim_elements_covered=(
            "protective case",
            "exposed contactors",
            "second contactors on exterior",
            "docking system",
            "conductive charging",
        ),
        base_confidence=88,
    ),
    PriorArtReference(
        id="linea-pro",
        name="Linea Pro / Apple EasyPay",
        citation="Infinite Peripherals Linea Pro (2009)",
        type=ReferenceType.PRODUCT,
        relevance="Sled-style enclosure with dock connector and charging dock - used in "
                  "Apple retail",
        key_teachings=(
            "Sled-style protective enclosure for iPhone/iPod (mid-2009)",
            "30-pin dock connector integration",
            "Dedicated charging dock",
            "Male connector inside sled connects to device",
            "Used in Apple retail stores for EasyPay",
        ),
        claim_elements_covered=(
            "protective case",
            "male plug",
            "docking system",
            "docking station",
        ),
        base_confidence=85,
    ),
    PriorArtReference(
        id="mophie-juice-pack",
        name="Mophie Juice Pack + Dock",
        citation="Mophie Juice Pack and Charging Dock (2011)",
        type=ReferenceType.PRODUCT,
        relevance="Battery case with pogo pin contacts that interface with charging dock",
        key_teachings=(
            "Battery case that surrounds and protects device",
            "Pogo pin contacts on bottom of case",
            "Dedicated dock with matching pogo pins",
            "Charges on contact - drop and go",
            "Pass-through USB for device charging",
        ),
        claim_elements_covered=(
            "protective case",
            "second contactors on exterior",
            "docking system",
            "docking station",
            "docking connector",
        ),
        base_confidence=87,
    ),
    PriorArtReference(
        id="iport-charge-case",
        name="iPort Charge Case and Stand",
        citation="iPort Charge Case and Stand (November 2013)",
        type=ReferenceType.PRODUCT,
        relevance="Dana Innovations product - protective case with conductive contacts "
                  "that mate with dock contacts",
        key_teachings=(
            "Protective case with raised conductive contacts on back (Nov 2013)",
            "Dock has matching raised contacts that align with case contacts",
            "Magnetic alignment between case and dock",
            "Conductive charging - not inductive (iLounge review)",
            "Charges automatically when case contacts meet dock contacts",
            "Portrait and landscape orientation support",
        ),
        claim_elements_covered=(
            "protective case",
            "second contactors on exterior",
            "docking system",
            "docking station",
            "docking connector",
            "magnetic coupling",
        ),
        base_confidence=92,
    ),
    PriorArtReference(
        id="honeywell-captuvo",
        name="Honeywell Captuvo SL22",
        citation="Honeywell Captuvo SL22 Enterprise Sled (July 2012)",
        type=ReferenceType.PRODUCT,
        relevance="Enterprise sled for iPod/iPhone with dedicated charging cradle/Homebase",
        key_teachings=(
            "Enterprise sled enclosure for iPod Touch (July 2012)",
            "Dedicated charging cradle (Homebase/ChargeBase)",
            "Sled drops into cradle for charging",
            "Dock connector integration inside sled",
            "Used in retail/enterprise environments",
        ),
        claim_elements_covered=(
            "protective case",
            "male plug",
            "docking system",
            "docking station",
        ),
        base_confidence=85,
    ),
)


ELEMENT_TYPES: Mapping[str, ElementType] = MappingProxyType({
    e.id: e for e in (
        # Protective cover/case
        ElementType("protective_cover", 1.0, "Protective cover/case/shell for electronic device"),
        ElementType("panel_exterior", 0.9, "Panel with exterior surface"),
        ElementType("skirt_perimeter", 0.9, "Skirt surrounding panel perimeter"),
        ElementType("interior_cavity", 0.8, "Interior cavity formed by panel and skirt"),
        ElementType("flexible_shell", 0.85, "Flexible/elastomeric shell material"),
        # Adapter/connector
        ElementType("adapter", 1.0, "Adapter supported by shell"),
        ElementType("male_plug", 0.95, "Male plug with connectors"),
        ElementType("first_contactors", 0.9, "First contactors on male plug"),
        ElementType("second_contactors", 0.9, "Second contactors exposed on exterior"),
        ElementType("female_nest", 0.85, "Female nest/socket"),
        # Docking system
        ElementType("docking_system", 1.0, "Docking system comprising cover and dock"),
        ElementType("docking_station", 0.9, "Docking station/cradle with base"),
        ElementType("docking_connector", 0.9, "Docking connector to mate with contactors"),
        # Special features
        ElementType("locator_dam", 0.8, "Locator dam surrounding contactor"),
        ElementType("magnetic_coupling", 0.8, "Magnetic element for coupling"),
        ElementType("hard_shell", 0.85, "Hard shell around flexible cover"),
        ElementType("transparent_window", 0.75, "Transparent window panel"),
        ElementType("ring_contacts", 0.85, "Ring-shaped contactor contacts"),
        ElementType("internal_conductors", 0.8, "Internal electrical conductors/wires"),
        ElementType("alignment_features", 0.8, "Alignment pins/holes/features"),
        ElementType("nesting_appendage", 0.75, "Male nesting appendage"),
    )
})


PRIOR_ART_ELEMENT_COVERAGE: Mapping[str, Mapping[str, int]] = _freeze({
    "thiers": {
        "protective_cover": 95,
        "panel_exterior": 92,
        "skirt_perimeter": 90,
        "interior_cavity": 88,
        "adapter": 85,
        "male_plug": 90,
        "first_contactors": 88,
        "second_contactors": 82,
        "female_nest": 85,
        "docking_system": 92,
        "docking_station": 90,
        "docking_connector": 88,
        "internal_conductors": 90,
        "magnetic_coupling": 85,
        "alignment_features": 80,
    },
    "supran-408": {
        "protective_cover": 90,
        "panel_exterior": 85,
        "skirt_perimeter": 85,
        "interior_cavity": 88,
        "flexible_shell": 92,
        "male_plug": 82,
        "first_contactors": 80,
        "second_contactors": 88,
        "ring_contacts": 95,
        "docking_system": 88,
        "docking_connector": 85,
        "locator_dam": 90,
        "alignment_features": 90,
        "nesting_appendage": 88,
        "magnetic_coupling": 90,
    },
    "supran-416": {
        "protective_cover": 88,
        "flexible_shell": 90,
        "magnetic_coupling": 95,  # central magnetic mount, claims 1, 3, 4
        "docking_system": 90,
        "docking_connector": 92,  # exposed contacts for conductive charging, claim 9
        "docking_station": 90,
        "alignment_features": 92,  # indexing protrusions, claim 6
        "nesting_appendage": 92,  # circular mounting portion, claim 2
        "ring_contacts": 90,
        "locator_dam": 88,
    },
    "hoellwarth-850": {
        "protective_cover": 96,
        "panel_exterior": 95,
        "skirt_perimeter": 95,
        "interior_cavity": 94,
        "flexible_shell": 90,
        "adapter": 96,
        "male_plug": 95,
        "first_contactors": 94,
        "second_contactors": 95,
        "female_nest": 92,
        "docking_system": 90,
        "internal_conductors": 92,
    },
    "hoellwarth-343": {
        "docking_system": 92,
        "docking_station": 94,
        "docking_connector": 95,
    },
    "kim-781": {
        "protective_cover": 90,
        "panel_exterior": 85,
        "adapter": 82,
        "male_plug": 85,
        "first_contactors": 88,
        "second_contactors": 90,
        "ring_contacts": 92,
        "docking_system": 85,
        "docking_station": 88,
        "internal_conductors": 85,
    },
    "kim-099": {
        "protective_cover": 88,
        "flexible_shell": 90,
        "adapter": 85,
        "male_plug": 90,
        "first_contactors": 82,
    },
    "rayner-494": {
        "protective_cover": 88,
        "panel_exterior": 85,
        "interior_cavity": 82,
        "hard_shell": 90,
        "alignment_features": 92,
        "second_contactors": 80,
        "transparent_window": 85,
    },
    "wilson": {
        "protective_cover": 88,
        "panel_exterior": 86,
        "skirt_perimeter": 85,
        "adapter": 90,
        "male_plug": 88,
        "second_contactors": 82,
    },
    "iport-launchport": {
        "protective_cover": 85,
        "male_plug": 88,
        "docking_system": 85,
        "docking_station": 88,
        "magnetic_coupling": 92,
    },
    "infinea-tab-m": {
        "protective_cover": 82,
        "male_plug": 80,
        "second_contactors": 85,
    },
    "duracell-mygrid": {
        "protective_cover": 90,
        "second_contactors": 92,  # four metal contacts on back of sleeve
        "docking_system": 88,
        "docking_station": 88,
        "docking_connector": 85,
    },
    "linea-pro": {
        "protective_cover": 85,
        "male_plug": 90,  # 30-pin connector inside sled
        "docking_system": 85,
        "docking_station": 88,
    },
    "mophie-juice-pack": {
        "protective_cover": 90,
        "second_contactors": 92,  # pogo pins on bottom of case
        "docking_system": 90,
        "docking_station": 90,
        "docking_connector": 90,
    },
    "iport-charge-case": {
        "protective_cover": 95,
        "second_contactors": 95,
        "docking_system": 95,
        "docking_station": 95,
        "docking_connector": 95,
        "magnetic_coupling": 90,
    },
    "honeywell-captuvo": {
        "protective_cover": 85,
        "male_plug": 88,
        "docking_system": 88,
        "docking_station": 90,
    },
})


_CONTENTION_SET = (
    "thiers", "supran-408", "supran-416", "kim-781", "rayner-494", "iport-launchport",
    "infinea-tab-m", "duracell-mygrid", "mophie-juice-pack", "iport-charge-case",
    "honeywell-captuvo",
)

PATENT_PRIOR_ART_MAP: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "140": _CONTENTION_SET,
    "141": _CONTENTION_SET,
    "142": _CONTENTION_SET,
    "275": _CONTENTION_SET,
    "279": (
        "kim-099", "rayner-494", "thiers", "supran-408", "supran-416", "iport-launchport",
        "infinea-tab-m", "linea-pro", "mophie-juice-pack", "iport-charge-case",
        "honeywell-captuvo",
    ),
    "444": (
        "hoellwarth-850", "hoellwarth-343", "wilson", "rayner-494", "iport-launchport",
        "infinea-tab-m", "supran-408", "supran-416", "thiers", "duracell-mygrid",
        "mophie-juice-pack", "linea-pro", "iport-charge-case", "honeywell-captuvo",
    ),
    "458": (
        "hoellwarth-850", "thiers", "supran-408", "supran-416", "kim-099", "rayner-494",
        "iport-launchport", "infinea-tab-m", "duracell-mygrid", "mophie-juice-pack",
        "iport-charge-case", "honeywell-captuvo",
    ),
    "535": (
        "hoellwarth-850", "wilson", "thiers", "supran-408", "supran-416", "kim-099",
        "rayner-494", "iport-launchport", "infinea-tab-m", "mophie-juice-pack",
        "iport-charge-case", "honeywell-captuvo",
    ),
    "550": (
        "hoellwarth-850", "thiers", "supran-408", "supran-416", "kim-099", "rayner-494",
        "hoellwarth-343", "iport-launchport", "duracell-mygrid", "mophie-juice-pack",
        "iport-charge-case", "honeywell-captuvo",
    ),
    "387": (
        "thiers", "supran-408", "supran-416", "kim-781", "rayner-494", "iport-launchport",
        "duracell-mygrid", "mophie-juice-pack", "iport-charge-case", "honeywell-captuvo",
    ),
    "639": (
        "thiers", "supran-408", "supran-416", "kim-781", "iport-launchport",
        "duracell-mygrid", "mophie-juice-pack", "iport-charge-case", "honeywell-captuvo",
    ),
    "026": (
        "thiers", "supran-408", "supran-416", "kim-781", "iport-launchport", "linea-pro",
        "mophie-juice-pack", "iport-charge-case", "honeywell-captuvo",
    ),
    "330": (
        "thiers", "supran-408", "supran-416", "rayner-494", "kim-781", "mophie-juice-pack",
        "iport-charge-case", "honeywell-captuvo",
    ),
    "658": (
        "supran-408", "supran-416", "thiers", "kim-781", "iport-launchport",
        "duracell-mygrid", "mophie-juice-pack", "iport-charge-case", "honeywell-captuvo",
    ),
    "399": (
        "hoellwarth-850", "thiers", "supran-408", "supran-416", "hoellwarth-343",
        "duracell-mygrid", "mophie-juice-pack", "iport-charge-case", "honeywell-captuvo",
    ),
    "515": (
        "hoellwarth-850", "thiers", "supran-408", "supran-416", "hoellwarth-343",
        "duracell-mygrid", "mophie-juice-pack", "iport-charge-case", "honeywell-captuvo",
    ),
    "334": (
        "hoellwarth-850", "thiers", "supran-408", "supran-416", "hoellwarth-343",
        "duracell-mygrid", "mophie-juice-pack", "iport-charge-case", "honeywell-captuvo",
    ),
    "884": (
        "hoellwarth-850", "thiers", "supran-408", "supran-416", "kim-099", "hoellwarth-343",
        "duracell-mygrid", "mophie-juice-pack", "iport-charge-case", "honeywell-captuvo",
    ),
})


def _claims(**claims: Tuple[str, ...]) -> Mapping[str, Tuple[str, ...]]:
    # Keyword names cannot contain spaces, so "Claim_1" becomes "Claim 1"
    return MappingProxyType({label.replace("_", " "): elements for label, elements in claims.items()})


PATENT_CLAIM_ELEMENTS: Mapping[str, Mapping[str, Tuple[str, ...]]] = MappingProxyType({
    "140": _claims(
        Claim_1=("protective_cover", "panel_exterior", "skirt_perimeter", "male_plug",
                 "first_contactors", "second_contactors", "female_nest"),
        Claim_7=("docking_system", "docking_station", "docking_connector"),
    ),
    "141": _claims(
        Claim_1=("protective_cover", "panel_exterior", "skirt_perimeter", "male_plug",
                 "first_contactors"),
        Claim_13=("docking_system", "docking_connector"),
    ),
    "142": _claims(
        Claim_1=("protective_cover", "panel_exterior", "skirt_perimeter", "male_plug",
                 "second_contactors"),
        Claim_14=("docking_system", "docking_station"),
    ),
    "275": _claims(
        Claim_1=("protective_cover", "panel_exterior", "skirt_perimeter", "interior_cavity",
                 "male_plug", "first_contactors", "second_contactors", "internal_conductors"),
        Claim_19=("docking_system", "docking_station", "docking_connector"),
    ),
    "279": _claims(
        Claim_1=("protective_cover", "flexible_shell", "panel_exterior", "skirt_perimeter",
                 "male_plug", "second_contactors"),
        Claim_9=("docking_system", "docking_connector"),
        Claim_20=("protective_cover", "panel_exterior", "female_nest"),
    ),
    "444": _claims(
        Claim_1=("protective_cover", "panel_exterior", "skirt_perimeter", "female_nest",
                 "adapter", "male_plug", "first_contactors", "second_contactors"),
        Claim_19=("protective_cover", "female_nest", "adapter", "male_plug",
                  "first_contactors", "second_contactors"),
        Claim_28=("docking_system", "docking_connector"),
    ),
    "458": _claims(
        Claim_12=("protective_cover", "panel_exterior", "skirt_perimeter", "adapter",
                  "male_plug", "first_contactors", "second_contactors"),
        Claim_20=("docking_system", "docking_connector"),
    ),
    "535": _claims(
        Claim_15=("protective_cover", "panel_exterior", "skirt_perimeter", "adapter",
                  "male_plug", "first_contactors", "second_contactors"),
        Claim_19=("docking_system", "docking_station"),
    ),
    "550": _claims(
        Claim_1=("protective_cover", "panel_exterior", "skirt_perimeter", "male_plug",
                 "first_contactors"),
        Claim_7=("docking_system", "docking_station"),
        Claim_9=("protective_cover", "second_contactors"),
        Claim_13=("docking_system",),
        Claim_17=("protective_cover", "adapter"),
        Claim_18=("protective_cover", "panel_exterior"),
        Claim_21=("docking_system", "docking_station"),
        Claim_27=("docking_system", "docking_connector"),
    ),
    "387": _claims(
        Claim_1=("protective_cover", "flexible_shell", "panel_exterior", "skirt_perimeter",
                 "adapter", "male_plug", "second_contactors", "hard_shell"),
        Claim_8=("hard_shell", "flexible_shell", "adapter"),
        Claim_17=("docking_system", "docking_station", "docking_connector"),
    ),
    "639": _claims(
        Claim_1=("protective_cover", "flexible_shell", "panel_exterior", "skirt_perimeter",
                 "adapter", "male_plug", "second_contactors", "locator_dam",
                 "magnetic_coupling"),
        Claim_5=("protective_cover", "nesting_appendage"),
        Claim_15=("docking_system", "docking_station"),
    ),
    "026": _claims(
        Claim_1=("protective_cover", "flexible_shell", "adapter", "male_plug",
                 "internal_conductors"),
        Claim_10=("protective_cover", "adapter", "internal_conductors"),
        Claim_18=("docking_system", "docking_connector"),
    ),
    "330": _claims(
        Claim_1=("protective_cover", "flexible_shell", "transparent_window", "adapter",
                 "male_plug"),
        Claim_12=("docking_system", "docking_station"),
    ),
    "658": _claims(
        Claim_1=("protective_cover", "panel_exterior", "interior_cavity", "adapter",
                 "male_plug", "ring_contacts"),
        Claim_13=("docking_system", "docking_connector", "ring_contacts"),
    ),
    "399": _claims(
        Claim_1=("protective_cover", "panel_exterior", "skirt_perimeter", "adapter",
                 "male_plug", "first_contactors", "second_contactors"),
        Claim_14=("docking_system", "docking_connector"),
    ),
    "515": _claims(
        Claim_1=("protective_cover", "interior_cavity", "adapter", "male_plug",
                 "second_contactors"),
        Claim_15=("docking_system", "docking_connector"),
    ),
    "334": _claims(
        Claim_1=("protective_cover", "panel_exterior", "skirt_perimeter", "adapter",
                 "male_plug", "second_contactors"),
        Claim_12=("docking_system", "docking_connector"),
    ),
    "884": _claims(
        Claim_1=("protective_cover", "panel_exterior", "skirt_perimeter", "adapter",
                 "male_plug", "first_contactors", "second_contactors"),
        Claim_13=("docking_system", "docking_connector"),
    ),
})


def get_prior_art(reference_id: str) -> Optional[PriorArtReference]:
    """Look up a reference by id."""
    return PRIOR_ART_DB.get(reference_id)


def get_all_prior_art() -> List[PriorArtReference]:
    return list(PRIOR_ART_DB.values())


def get_prior_art_for_element(element: str) -> List[PriorArtReference]:
    """References whose free-text covered elements match the given text.

    Matching is a case-insensitive substring test in either direction, so
    "male plug" finds both "male plug" and "male plug/connector".
    """
    needle = element.lower()
    return [
        ref for ref in PRIOR_ART_DB.values()
        if any(needle in covered.lower() or covered.lower() in needle
               for covered in ref.claim_elements_covered)
    ]


def get_prior_art_for_patent(patent_id: str) -> List[PriorArtReference]:
    """References applicable to a patent, in map order. Unknown ids are skipped."""
    return [
        PRIOR_ART_DB[ref_id]
        for ref_id in PATENT_PRIOR_ART_MAP.get(patent_id, ())
        if ref_id in PRIOR_ART_DB
    ]


def get_coverage(reference_id: str, element_type: str) -> int:
    """Coverage strength of one reference for one element type; 0 when absent."""
    return PRIOR_ART_ELEMENT_COVERAGE.get(reference_id, {}).get(element_type, 0)


def validate_catalogue() -> List[str]:
    """Report authoring inconsistencies between the tables.

    The scoring engine treats every gap as zero coverage, so these are
    warnings for whoever edits the catalogue, never runtime errors.

    Returns:
        Human-readable issue descriptions; empty when consistent.
    """
    issues: List[str] = []

    for patent_id, ref_ids in PATENT_PRIOR_ART_MAP.items():
        for ref_id in ref_ids:
            if ref_id not in PRIOR_ART_DB:
                issues.append(f"patent {patent_id}: unknown prior art '{ref_id}'")

    for ref_id, row in PRIOR_ART_ELEMENT_COVERAGE.items():
        if ref_id not in PRIOR_ART_DB:
            issues.append(f"coverage: unknown prior art '{ref_id}'")
        for element_type, strength in row.items():
            if element_type not in ELEMENT_TYPES:
                issues.append(f"coverage {ref_id}: unknown element type '{element_type}'")
            if not 0 <= strength <= 100:
                issues.append(f"coverage {ref_id}.{element_type}: strength {strength} outside 0-100")

    covered = {e for row in PRIOR_ART_ELEMENT_COVERAGE.values() for e in row}
    for patent_id, claims in PATENT_CLAIM_ELEMENTS.items():
        if patent_id not in PATENT_PRIOR_ART_MAP:
            issues.append(f"patent {patent_id}: no prior art mapped")
        for claim, elements in claims.items():
            for element_type in elements:
                if element_type not in ELEMENT_TYPES:
                    issues.append(f"patent {patent_id} {claim}: unknown element type '{element_type}'")
                elif element_type not in covered:
                    issues.append(f"patent {patent_id} {claim}: '{element_type}' has no coverage anywhere")

    for issue in issues:
        logger.warning(issue)
    return issues
