"""
room_sizes.py - Room size reference table v1.0

Facility Layout Engine
Typical dimensions for pharmaceutical facility rooms (FDA, EMA, ICH and
PIC/S practice), with fuzzy name lookup and capacity-aware scaling.

All dimensions are metres and square metres.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import math

from pharmaplan.facility.schema.cleanroom import CleanroomClass, RoomCategory

__all__ = [
    'ScalingFactors',
    'RoomSizeRecord',
    'ScaledDimensions',
    'ROOM_SIZE_TABLE',
    'DEFAULT_ROOM_WIDTH',
    'DEFAULT_ROOM_HEIGHT',
    'DEFAULT_ROOM_AREA',
    'DEFAULT_ROOM_CATEGORY',
    'find_room_size',
    'scale_room_dimensions',
    'rooms_by_category',
    'rooms_by_cleanroom_class',
    'all_room_types',
]


# =============================================================================
# RECORDS
# =============================================================================

@dataclass(frozen=True)
class ScalingFactors:
    """Area growth per unit of capacity."""

    per_batch_liter: Optional[float] = None       # m² per litre of batch size
    per_throughput_unit: Optional[float] = None   # m² per unit/day


@dataclass(frozen=True)
class RoomSizeRecord:
    """
    Reference data for one room type.

    Attributes:
        room_type: Canonical room-type name
        aliases: Alternative names used for matching
        category: Functional category
        cleanroom_class: Grade, None for unclassified rooms
        width, height, area: Typical dimensions
        min_area, max_area: Allowed area range after scaling
        scaling: Capacity scaling factors
        equipment_footprint: Fraction of area occupied by equipment (0-1)
        shape_type: Preferred outline
        description: Short description
    """

    room_type: str
    aliases: Tuple[str, ...]
    category: RoomCategory
    cleanroom_class: Optional[CleanroomClass]
    width: float
    height: float
    area: float
    min_area: float
    max_area: float
    scaling: ScalingFactors = field(default_factory=ScalingFactors)
    equipment_footprint: float = 0.0
    shape_type: str = "rectangle"
    description: str = ""

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "room_type": self.room_type,
            "aliases": list(self.aliases),
            "category": self.category.value,
            "cleanroom_class": self.cleanroom_class.value if self.cleanroom_class else None,
            "typical_dimensions": {"width": self.width, "height": self.height, "area": self.area},
            "size_range": {"min_area": self.min_area, "max_area": self.max_area},
            "scaling_factors": {
                "per_batch_liter": self.scaling.per_batch_liter,
                "per_throughput_unit": self.scaling.per_throughput_unit,
            },
            "equipment_footprint": self.equipment_footprint,
            "shape_type": self.shape_type,
            "description": self.description,
        }


@dataclass(frozen=True)
class ScaledDimensions:
    width: float
    height: float
    area: float


def _room(
    room_type: str,
    aliases: Tuple[str, ...],
    category: RoomCategory,
    cleanroom_class: Optional[CleanroomClass],
    dims: Tuple[float, float, float],
    size_range: Tuple[float, float],
    footprint: float,
    description: str,
    per_batch: Optional[float] = None,
    per_throughput: Optional[float] = None,
) -> RoomSizeRecord:
    width, height, area = dims
    return RoomSizeRecord(
        room_type=room_type,
        aliases=aliases,
        category=category,
        cleanroom_class=cleanroom_class,
        width=width,
        height=height,
        area=area,
        min_area=size_range[0],
        max_area=size_range[1],
        scaling=ScalingFactors(per_batch, per_throughput),
        equipment_footprint=footprint,
        description=description,
    )


_P = RoomCategory.PRODUCTION
_QC = RoomCategory.QUALITY_CONTROL
_WH = RoomCategory.WAREHOUSE
_UT = RoomCategory.UTILITIES
_PE = RoomCategory.PERSONNEL
_SU = RoomCategory.SUPPORT

_A = CleanroomClass.A
_B = CleanroomClass.B
_C = CleanroomClass.C
_D = CleanroomClass.D
_CNC = CleanroomClass.CNC


# =============================================================================
# REFERENCE TABLE
# =============================================================================

ROOM_SIZE_TABLE: Tuple[RoomSizeRecord, ...] = (
    # Production - Grade A/B
    _room("Sterile Filling Room",
          ("filling room", "aseptic filling", "vial filling", "filling area", "grade a filling"),
          _P, _A, (6, 8, 48), (30, 100), 0.5,
          "Grade A aseptic filling area for sterile products (vials, syringes, ampoules)",
          per_batch=0.5, per_throughput=0.001),
    _room("Sterile Preparation Room",
          ("prep room", "aseptic prep", "grade b prep", "preparation area", "compounding room"),
          _P, _B, (7, 9, 63), (40, 120), 0.45,
          "Grade B background for aseptic preparation and compounding",
          per_batch=0.8, per_throughput=0.0015),
    _room("Lyophilization Room",
          ("freeze drying", "lyophilizer room", "lyo room", "freeze dryer area"),
          _P, _B, (8, 10, 80), (50, 150), 0.6,
          "Freeze-drying/lyophilization area for sterile products",
          per_batch=1.2),

    # Production - Grade C/D
    _room("Granulation Room",
          ("granulator room", "wet granulation", "dry granulation", "granulation area"),
          _P, _D, (8, 10, 80), (50, 150), 0.5,
          "Granulation area for tablet/capsule production",
          per_batch=1.0),
    _room("Compression Room",
          ("tablet compression", "tableting", "compression area", "tablet press room"),
          _P, _D, (9, 11, 99), (60, 180), 0.4,
          "Tablet compression and forming area",
          per_throughput=0.00005),
    _room("Coating Room",
          ("film coating", "tablet coating", "coating area", "coater room"),
          _P, _D, (7, 9, 63), (40, 120), 0.5,
          "Film coating area for tablets",
          per_batch=0.8),
    _room("Capsule Filling Room",
          ("encapsulation", "capsule filling", "filling area", "capsule area"),
          _P, _D, (7, 9, 63), (40, 120), 0.45,
          "Capsule filling and sealing area",
          per_throughput=0.00003),
    _room("Packaging Room",
          ("primary packaging", "secondary packaging", "packaging area", "pack room"),
          _P, _D, (12, 15, 180), (100, 400), 0.35,
          "Primary and secondary packaging area",
          per_throughput=0.0001),
    _room("Labeling Room",
          ("labeling area", "label application", "labelling"),
          _P, _CNC, (8, 10, 80), (50, 150), 0.3,
          "Labeling and serialization area"),

    # Weighing and dispensing
    _room("Weighing Room",
          ("dispensing", "weighing area", "dispensary", "weighing booth"),
          _P, _D, (5, 6, 30), (20, 60), 0.4,
          "Raw material weighing and dispensing area"),
    _room("Sampling Room",
          ("sampling booth", "sample room", "sampling area"),
          _P, _D, (4, 5, 20), (15, 40), 0.3,
          "Material sampling area with containment"),

    # Airlocks and pass-throughs
    _room("Material Airlock",
          ("material pass", "material pass-through", "mat airlock", "transfer airlock"),
          _SU, _B, (3, 3, 9), (6, 20), 0.2,
          "Airlock for material transfer between cleanroom grades"),
    _room("Personnel Airlock",
          ("personnel pass", "personnel gowning", "entry airlock", "gowning airlock"),
          _PE, _C, (3, 4, 12), (8, 25), 0.1,
          "Airlock for personnel entry/exit with gowning"),

    # Quality control
    _room("Analytical Laboratory",
          ("analytical lab", "chemistry lab", "qc lab", "testing lab", "analysis lab"),
          _QC, _CNC, (10, 12, 120), (80, 250), 0.5,
          "Analytical testing laboratory for chemical analysis"),
    _room("Microbiology Laboratory",
          ("micro lab", "microbiology lab", "bio lab", "sterility testing"),
          _QC, _B, (8, 10, 80), (50, 150), 0.45,
          "Microbiology laboratory for sterility and bioburden testing"),
    _room("Stability Chamber Room",
          ("stability room", "stability storage", "stability testing", "climate chamber"),
          _QC, _CNC, (6, 8, 48), (30, 100), 0.6,
          "Controlled environment for stability testing"),
    _room("Instrument Room",
          ("instrument lab", "hplc room", "gcms room", "analytical instruments"),
          _QC, _CNC, (7, 8, 56), (35, 120), 0.55,
          "Room for analytical instruments (HPLC, GC-MS, etc.)"),

    # Warehouse and storage
    _room("Raw Material Warehouse",
          ("raw material storage", "rm warehouse", "raw materials", "incoming storage"),
          _WH, _CNC, (15, 20, 300), (150, 1000), 0.2,
          "Storage for raw materials and excipients",
          per_throughput=0.0005),
    _room("Finished Goods Warehouse",
          ("finished goods storage", "fg warehouse", "finished product storage", "product warehouse"),
          _WH, _CNC, (15, 20, 300), (150, 1000), 0.2,
          "Storage for finished pharmaceutical products",
          per_throughput=0.0008),
    _room("Quarantine Storage",
          ("quarantine area", "quarantine room", "hold area", "quarantine warehouse"),
          _WH, _CNC, (8, 10, 80), (40, 200), 0.2,
          "Quarantine storage for materials pending release"),
    _room("Cold Storage",
          ("refrigerated storage", "cold room", "cold chain", "cold warehouse"),
          _WH, _CNC, (6, 8, 48), (25, 150), 0.15,
          "Temperature-controlled storage (2-8°C)"),
    _room("Packaging Material Storage",
          ("packaging storage", "pm storage", "packaging warehouse", "pack material storage"),
          _WH, _CNC, (10, 12, 120), (60, 300), 0.2,
          "Storage for packaging materials"),

    # Utilities
    _room("HVAC Room",
          ("air handling unit", "ahu room", "hvac equipment", "air conditioning room"),
          _UT, None, (10, 12, 120), (80, 300), 0.7,
          "HVAC equipment and air handling units"),
    _room("Purified Water System",
          ("water treatment", "pw system", "wfi system", "water purification", "water room"),
          _UT, None, (8, 10, 80), (50, 200), 0.65,
          "Purified water and WFI generation system"),
    _room("Compressed Air System",
          ("compressed air room", "air compressor", "utility air"),
          _UT, None, (6, 8, 48), (30, 100), 0.6,
          "Compressed air generation and distribution"),
    _room("Electrical Room",
          ("electrical switchgear", "power distribution", "electrical equipment"),
          _UT, None, (6, 8, 48), (30, 120), 0.5,
          "Electrical distribution and control equipment"),
    _room("Boiler Room",
          ("boiler", "steam generation", "steam room"),
          _UT, None, (7, 9, 63), (40, 150), 0.6,
          "Steam generation for facility"),
    _room("Chiller Room",
          ("chiller", "cooling system", "refrigeration plant"),
          _UT, None, (8, 10, 80), (50, 200), 0.65,
          "Chilled water generation for HVAC"),

    # Personnel
    _room("Gowning Room",
          ("changing room", "gowning area", "dress room", "cleanroom gowning"),
          _PE, _D, (6, 8, 48), (30, 100), 0.2,
          "Personnel gowning and changing area"),
    _room("Washroom",
          ("bathroom", "restroom", "toilet", "washing facilities"),
          _PE, None, (4, 5, 20), (12, 40), 0.4,
          "Personnel washrooms and toilets"),
    _room("Break Room",
          ("cafeteria", "canteen", "lunch room", "rest area"),
          _PE, None, (8, 10, 80), (40, 200), 0.3,
          "Employee break and dining area"),
    _room("Office Area",
          ("office", "administrative office", "desk area"),
          _PE, None, (10, 12, 120), (50, 300), 0.25,
          "Administrative office space"),
    _room("Training Room",
          ("training area", "meeting room", "conference room"),
          _PE, None, (8, 10, 80), (40, 150), 0.3,
          "Training and meeting facilities"),

    # Support
    _room("Waste Disposal Room",
          ("waste room", "waste management", "disposal area", "waste storage"),
          _SU, None, (5, 6, 30), (20, 80), 0.3,
          "Waste segregation and temporary storage"),
    _room("Maintenance Workshop",
          ("maintenance room", "workshop", "tool room", "maintenance area"),
          _SU, None, (8, 10, 80), (50, 150), 0.4,
          "Maintenance and repair workshop"),
    _room("Receiving Area",
          ("receiving dock", "goods receiving", "inbound dock", "receiving bay"),
          _SU, None, (10, 12, 120), (80, 300), 0.2,
          "Material receiving and inspection area"),
    _room("Shipping Area",
          ("shipping dock", "dispatch", "outbound dock", "loading bay"),
          _SU, None, (10, 12, 120), (80, 300), 0.2,
          "Finished goods shipping and dispatch"),
    _room("Equipment Staging",
          ("staging area", "equipment storage", "clean equipment storage"),
          _SU, _D, (6, 8, 48), (30, 100), 0.25,
          "Clean equipment staging and storage"),
    _room("Corridor",
          ("hallway", "corridor area", "passageway"),
          _SU, _D, (2.5, 10, 25), (15, 100), 0.05,
          "Cleanroom corridor for material/personnel movement"),

    # Specialized production
    _room("API Manufacturing",
          ("api room", "active ingredient", "api synthesis", "api production"),
          _P, _D, (12, 15, 180), (100, 400), 0.55,
          "Active Pharmaceutical Ingredient manufacturing",
          per_batch=2.0),
    _room("Fermentation Room",
          ("bioreactor room", "fermentation", "cell culture", "bioreactor area"),
          _P, _C, (10, 12, 120), (80, 300), 0.6,
          "Fermentation and bioreactor area for biologics",
          per_batch=1.5),
    _room("Purification Room",
          ("purification", "chromatography", "downstream processing"),
          _P, _C, (10, 12, 120), (70, 250), 0.55,
          "Protein purification and chromatography"),
)

# Generic size used when a name matches nothing in the table
DEFAULT_ROOM_WIDTH = 8.0
DEFAULT_ROOM_HEIGHT = 10.0
DEFAULT_ROOM_AREA = 80.0
DEFAULT_ROOM_CATEGORY = RoomCategory.PRODUCTION


# =============================================================================
# LOOKUP
# =============================================================================

def find_room_size(
    room_name: str,
    table: Tuple[RoomSizeRecord, ...] = ROOM_SIZE_TABLE,
) -> Optional[RoomSizeRecord]:
    """
    Find the reference record for a room name.

    Matching is case-insensitive on the trimmed name and tries, in order:
    exact room type, exact alias, partial room type, partial alias. A partial
    match means either string contains the other.

    Returns:
        Matching record or None
    """
    term = (room_name or "").strip().lower()
    if not term:
        return None

    for record in table:
        if record.room_type.lower() == term:
            return record

    for record in table:
        if any(alias.lower() == term for alias in record.aliases):
            return record

    for record in table:
        name = record.room_type.lower()
        if term in name or name in term:
            return record

    for record in table:
        for alias in record.aliases:
            alias = alias.lower()
            if term in alias or alias in term:
                return record

    return None


def _round1(value: float) -> float:
    # Half-up rounding to one decimal
    return math.floor(value * 10 + 0.5) / 10


def scale_room_dimensions(
    record: RoomSizeRecord,
    batch_size: Optional[float] = None,
    throughput: Optional[float] = None,
) -> ScaledDimensions:
    """
    Scale a record's area by production capacity.

    Area grows linearly with batch size and throughput using the record's
    scaling factors, is clamped to the record's size range, and is turned
    back into width and height keeping the typical aspect ratio.
    """
    area = record.area
    if batch_size and record.scaling.per_batch_liter:
        area += batch_size * record.scaling.per_batch_liter
    if throughput and record.scaling.per_throughput_unit:
        area += throughput * record.scaling.per_throughput_unit

    area = max(record.min_area, min(area, record.max_area))

    height = math.sqrt(area / record.aspect_ratio)
    width = area / height

    return ScaledDimensions(
        width=_round1(width),
        height=_round1(height),
        area=_round1(area),
    )


def rooms_by_category(category: RoomCategory) -> List[RoomSizeRecord]:
    return [r for r in ROOM_SIZE_TABLE if r.category is category]


def rooms_by_cleanroom_class(cleanroom_class: CleanroomClass) -> List[RoomSizeRecord]:
    return [r for r in ROOM_SIZE_TABLE if r.cleanroom_class is cleanroom_class]


def all_room_types() -> List[str]:
    """All canonical room-type names, in table order."""
    return [r.room_type for r in ROOM_SIZE_TABLE]
