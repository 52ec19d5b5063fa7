"""
DataType enum for the copyable profile data files.

Each variant corresponds to exactly one data file in a profile's DATABASE
folder. The file name for each variant lives in the data type registry.
"""

from enum import Enum


class DataType(Enum):
    """Identity of a copyable data type."""
    SERVICES = "Services"
    COSTS = "Costs"
    INSTALLATION_TIMES = "InstallationTimes"
    FABRICATION_TIMES = "FabricationTimes"
    MATERIALS = "Materials"
    SPECIFICATIONS = "Specifications"
    SECTIONS = "Sections"
    ANCILLARIES = "Ancillaries"
    SUPPLIERS = "Suppliers"
    CONNECTORS = "Connectors"
    SEAMS = "Seams"
    LAYERS = "Layers"
    SETUP = "Setup"
    DAMPERS = "Dampers"
    AIRTURN = "Airturn"
    DIAMETERS = "Diameters"
    CUTOUTS = "Cutouts"
    NOTCHES = "Notches"
    STIFFENERS = "Stiffeners"
    LEADS = "Leads"
    SPLITTERS = "Splitters"
    SILENCERS = "Silencers"
    SUPPORT = "Support"
    TAKEOFF = "Takeoff"
    FACINGS = "Facings"
    NOTES = "Notes"
    RESISTANCE = "Resistance"
    RESIST_LINK = "ResistLink"
    STRESS_LOAD = "StressLoad"
    PART_NAMES = "PartNames"
    TEXT_ATTRIBUTES = "TextAttributes"
    HARDWARE_SPECS = "HardwareSpecs"
    INSULATION_SPECS = "InsulationSpecs"
    DRAWING_DB = "DrawingDb"
    NESTING = "Nesting"
    TOOL_DEFAULTS = "ToolDefaults"
