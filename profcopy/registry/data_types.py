"""Catalog of the data files that can be copied between profiles.

The order of the catalog defines the default display grouping
(Price & Labor, Primary, Secondary, Other). Copy order follows the caller's
selection order, not this catalog.

Example:
    >>> from profcopy.registry import create_selections
    >>> selections = create_selections()
    >>> selections[0].file_name
    'SUPPLIER.MAP'
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from rapidfuzz import fuzz

from profcopy import paths
from profcopy.models import DataType, DataTypeDescriptor, DataTypeSelection, ProfileInfo

GROUP_PRICE_LABOR = "Price & Labor"
GROUP_PRIMARY = "Primary"
GROUP_SECONDARY = "Secondary"
GROUP_OTHER = "Other"

# Minimum similarity (0.0-1.0) for a "did you mean" suggestion
SUGGESTION_THRESHOLD = 0.7


def _selective(data_type: DataType, display_name: str, file_name: str, group: str) -> DataTypeDescriptor:
    # Enumerable and deletable item by item; manifest key is the variant name.
    return DataTypeDescriptor(
        data_type=data_type,
        display_name=display_name,
        file_name=file_name,
        group=group,
        is_enumerable=True,
        supports_selective_cleanup=True,
        manifest_key=data_type.value,
    )


_DESCRIPTORS: Tuple[DataTypeDescriptor, ...] = (
    # Price & Labor - these files change together when pricing or labor changes
    _selective(DataType.SUPPLIERS, "Suppliers", "SUPPLIER.MAP", GROUP_PRICE_LABOR),
    DataTypeDescriptor(DataType.SETUP, "Setup", "SETUP.MAP", GROUP_PRICE_LABOR),
    _selective(DataType.COSTS, "Costs / Price Lists", "Cost.MAP", GROUP_PRICE_LABOR),
    _selective(DataType.INSTALLATION_TIMES, "Installation Times", "ETimes.MAP", GROUP_PRICE_LABOR),

    # Primary
    _selective(DataType.SERVICES, "Services", "service.map", GROUP_PRIMARY),
    _selective(DataType.FABRICATION_TIMES, "Fabrication Times", "FTimes.MAP", GROUP_PRIMARY),
    _selective(DataType.MATERIALS, "Materials", "Material.MAP", GROUP_PRIMARY),
    _selective(DataType.SPECIFICATIONS, "Specifications", "Specs.MAP", GROUP_PRIMARY),
    _selective(DataType.SECTIONS, "Sections", "sections.map", GROUP_PRIMARY),
    _selective(DataType.ANCILLARIES, "Ancillaries", "ANCILLRY.MAP", GROUP_PRIMARY),

    # Secondary
    _selective(DataType.CONNECTORS, "Connectors", "Connectr.map", GROUP_SECONDARY),
    DataTypeDescriptor(
        DataType.SEAMS, "Seams", "seam.map", GROUP_SECONDARY,
        is_enumerable=True, manifest_key=DataType.SEAMS.value,
    ),
    DataTypeDescriptor(DataType.LAYERS, "Layers", "layers.MAP", GROUP_SECONDARY),
    _selective(DataType.DAMPERS, "Dampers", "DAMPER.MAP", GROUP_SECONDARY),
    DataTypeDescriptor(DataType.DIAMETERS, "Diameters", "Diameter.MAP", GROUP_SECONDARY),

    # Other
    DataTypeDescriptor(DataType.AIRTURN, "Airturn", "Airturn.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.CUTOUTS, "Cutouts", "Cutouts.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.NOTCHES, "Notches", "Notches.MAP", GROUP_OTHER),
    _selective(DataType.STIFFENERS, "Stiffeners", "STIFFNER.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.LEADS, "Leads", "LEADS.MAP", GROUP_OTHER),
    DataTypeDescriptor(
        DataType.SPLITTERS, "Splitters", "splitter.MAP", GROUP_OTHER,
        is_enumerable=True, manifest_key=DataType.SPLITTERS.value,
    ),
    DataTypeDescriptor(DataType.SILENCERS, "Silencers", "Silencer.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.SUPPORT, "Support", "SUPPORT.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.TAKEOFF, "Takeoff", "TAKEOFF.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.FACINGS, "Facings", "FACINGS.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.NOTES, "Notes", "Notes.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.RESISTANCE, "Resistance", "RESISTANCE.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.RESIST_LINK, "Resistance Links", "RESISTLINK.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.STRESS_LOAD, "Stress Load", "StressLd.map", GROUP_OTHER),
    DataTypeDescriptor(DataType.PART_NAMES, "Part Names", "PARTNAME.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.TEXT_ATTRIBUTES, "Text Attributes", "TEXTATTS.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.HARDWARE_SPECS, "Hardware Specs", "HSpecs.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.INSULATION_SPECS, "Insulation Specs", "ISpecs.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.DRAWING_DB, "Drawing Database", "dwgdb.map", GROUP_OTHER),
    DataTypeDescriptor(DataType.NESTING, "Nesting", "NESTING.MAP", GROUP_OTHER),
    DataTypeDescriptor(DataType.TOOL_DEFAULTS, "Tool Defaults", "TOOLDFLT.MAP", GROUP_OTHER),
)


def get_all_descriptors() -> List[DataTypeDescriptor]:
    """Return the full catalog of copyable data types in display order."""
    return list(_DESCRIPTORS)


def get_descriptor(data_type: DataType) -> DataTypeDescriptor:
    """Look up the catalog entry for ``data_type``.

    Raises:
        KeyError: If the data type has no catalog entry.
    """
    for descriptor in _DESCRIPTORS:
        if descriptor.data_type is data_type:
            return descriptor
    raise KeyError(data_type)


def find_descriptor(name: str) -> Optional[DataTypeDescriptor]:
    """Find a descriptor by enum value, display name or file name (case-insensitive)."""
    wanted = name.strip().casefold()
    for descriptor in _DESCRIPTORS:
        candidates = (
            descriptor.data_type.value,
            descriptor.data_type.name,
            descriptor.display_name,
            descriptor.file_name,
        )
        if any(candidate.casefold() == wanted for candidate in candidates):
            return descriptor
    return None


def suggest_descriptor(name: str) -> Optional[DataTypeDescriptor]:
    """Closest catalog entry to a misspelled name, or None if nothing is similar enough.

    Compares against the enum value, display name and file name using
    RapidFuzz's normalized ratio.
    """
    wanted = name.strip().casefold()
    if not wanted:
        return None

    best: Optional[DataTypeDescriptor] = None
    best_score = 0.0
    for descriptor in _DESCRIPTORS:
        for candidate in (descriptor.data_type.value, descriptor.display_name, descriptor.file_name):
            # RapidFuzz returns 0-100
            score = fuzz.ratio(wanted, candidate.casefold()) / 100.0
            if score > best_score:
                best, best_score = descriptor, score

    if best_score >= SUGGESTION_THRESHOLD:
        return best
    return None


def create_selections(
    descriptors: Optional[Iterable[DataTypeDescriptor]] = None,
) -> List[DataTypeSelection]:
    """Create fresh, unselected session records for the given descriptors."""
    if descriptors is None:
        descriptors = _DESCRIPTORS
    return [DataTypeSelection(descriptor=descriptor) for descriptor in descriptors]


def check_available_data_types(
    profile: Optional[ProfileInfo], selections: Sequence[DataTypeSelection]
) -> None:
    """Set ``is_available`` on each selection from the files present in ``profile``.

    Does nothing when the profile is missing or its DATABASE folder does not exist.
    """
    if profile is None or not profile.is_valid():
        return

    for selection in selections:
        selection.is_available = paths.data_file_exists(profile.database_path, selection.file_name)
