"""
Fleet-level computations over a list of vehicle records.

Filtering, KPI metrics and chart breakdowns for the dashboard. Record lists
are owned by the caller; every function here returns new values and never
mutates its input.
"""

from typing import Any, Dict, List, Optional
from dataclasses import dataclass, asdict
from datetime import date

from schema import ConditionStatus, VehicleRecord
from transforms import to_gregorian

STATUS_LABELS = {
    ConditionStatus.ACTIVE: "ใช้การได้",
    ConditionStatus.MAINTENANCE: "ชำรุด",
    ConditionStatus.DISPOSAL: "รอจำหน่าย",
}

# Filter values accepted for status, Thai chart labels included
STATUS_FILTER_VALUES = {
    "ใช้การได้": ConditionStatus.ACTIVE,
    "ชำรุด": ConditionStatus.MAINTENANCE,
    "รอจำหน่าย": ConditionStatus.DISPOSAL,
    "Active": ConditionStatus.ACTIVE,
    "Maintenance": ConditionStatus.MAINTENANCE,
    "Disposal": ConditionStatus.DISPOSAL,
    "Unknown": ConditionStatus.UNKNOWN,
}

# (label, min_age, max_age) inclusive
AGE_GROUPS = (
    ("ไม่เกิน 5 ปี", 0, 5),
    ("6-10 ปี", 6, 10),
    ("11-15 ปี", 11, 15),
    ("16 ปีขึ้นไป", 16, 100),
)


@dataclass
class FleetFilter:
    """Dashboard filter state; None means "All"."""
    department: Optional[str] = None
    vehicle_type: Optional[str] = None
    status: Optional[str] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    search: str = ""

    @classmethod
    def for_age_group(cls, label: str) -> "FleetFilter":
        for group_label, min_age, max_age in AGE_GROUPS:
            if group_label == label:
                return cls(min_age=min_age, max_age=max_age)
        raise KeyError(f"Unknown age group '{label}'")


@dataclass
class DashboardMetrics:
    total_count: int
    active_count: int
    maintenance_count: int
    disposal_count: int
    total_value: float
    utilization_rate: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def status_label(status: ConditionStatus) -> str:
    """Thai chart label; anything not Active/Maintenance is charted as awaiting disposal."""
    return STATUS_LABELS.get(status, STATUS_LABELS[ConditionStatus.DISPOSAL])


def service_age(record: VehicleRecord, current_year: Optional[int] = None) -> int:
    """Years in service; vehicles without a purchase year count as new."""
    if current_year is None:
        current_year = date.today().year
    year = record.purchase_year or current_year
    return current_year - to_gregorian(year)


def _matches(record: VehicleRecord, fleet_filter: FleetFilter, current_year: int) -> bool:
    if fleet_filter.department is not None and record.department != fleet_filter.department:
        return False
    if fleet_filter.vehicle_type is not None and record.vehicle_type != fleet_filter.vehicle_type:
        return False

    if fleet_filter.status is not None:
        wanted = STATUS_FILTER_VALUES.get(fleet_filter.status)
        if wanted is None or record.condition_status != wanted:
            return False

    age = service_age(record, current_year)
    if fleet_filter.min_age is not None and age < fleet_filter.min_age:
        return False
    if fleet_filter.max_age is not None and age > fleet_filter.max_age:
        return False

    term = fleet_filter.search.lower()
    if term:
        haystacks = (record.plate_no, record.brand, record.engine_no)
        if not any(term in value.lower() for value in haystacks):
            return False

    return True


def filter_vehicles(
    records: List[VehicleRecord],
    fleet_filter: Optional[FleetFilter] = None,
    current_year: Optional[int] = None,
) -> List[VehicleRecord]:
    """Records matching every active filter, in input order."""
    if fleet_filter is None:
        return list(records)
    if current_year is None:
        current_year = date.today().year
    return [record for record in records if _matches(record, fleet_filter, current_year)]


def compute_dashboard_metrics(records: List[VehicleRecord]) -> DashboardMetrics:
    """KPI card values. Utilization is the active share, rounded to a whole percent."""
    total = len(records)
    active = sum(1 for r in records if r.condition_status == ConditionStatus.ACTIVE)
    maintenance = sum(1 for r in records if r.condition_status == ConditionStatus.MAINTENANCE)
    disposal = sum(1 for r in records if r.condition_status == ConditionStatus.DISPOSAL)

    return DashboardMetrics(
        total_count=total,
        active_count=active,
        maintenance_count=maintenance,
        disposal_count=disposal,
        total_value=sum(r.asset_value for r in records),
        # half rounds up
        utilization_rate=int(active * 100 / total + 0.5) if total else 0,
    )


def status_breakdown(records: List[VehicleRecord]) -> List[Dict[str, Any]]:
    counts = {label: 0 for label in STATUS_LABELS.values()}
    for record in records:
        counts[status_label(record.condition_status)] += 1
    return [{"name": label, "value": value} for label, value in counts.items()]


def age_breakdown(records: List[VehicleRecord], current_year: Optional[int] = None) -> List[Dict[str, Any]]:
    counts = {label: 0 for label, _, _ in AGE_GROUPS}
    for record in records:
        age = service_age(record, current_year)
        if age <= 5:
            counts[AGE_GROUPS[0][0]] += 1
        elif age <= 10:
            counts[AGE_GROUPS[1][0]] += 1
        elif age <= 15:
            counts[AGE_GROUPS[2][0]] += 1
        else:
            counts[AGE_GROUPS[3][0]] += 1
    return [{"name": label, "value": value} for label, value in counts.items()]


def department_breakdown(records: List[VehicleRecord]) -> List[Dict[str, Any]]:
    """Per-department status counts, departments in first-seen order."""
    departments: Dict[str, Dict[str, Any]] = {}
    for record in records:
        entry = departments.setdefault(
            record.department,
            {"name": record.department, **{label: 0 for label in STATUS_LABELS.values()}},
        )
        entry[status_label(record.condition_status)] += 1
    return list(departments.values())


def unique_values(records: List[VehicleRecord], attribute: str) -> List[str]:
    """Distinct values of a record attribute in first-seen order (filter dropdowns)."""
    seen: Dict[str, None] = {}
    for record in records:
        seen.setdefault(getattr(record, attribute), None)
    return list(seen)
