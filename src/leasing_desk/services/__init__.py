from leasing_desk.services.alerts import (
    AlertService,
    find_commitment_alerts,
    find_stale_properties,
)
from leasing_desk.services.commitments import CommitmentService
from leasing_desk.services.lease_resolution import LeaseResolutionCoordinator
from leasing_desk.services.portfolio import PortfolioService, PropertySaveResult
from leasing_desk.services.property_status import PropertyStatusAutomaton, expire_notice
from leasing_desk.services.reference_value import (
    ReferenceValue,
    ReferenceValueService,
    format_clp,
    format_uf,
    uf_to_clp,
)
from leasing_desk.services.remote_properties import RemotePropertySource, map_remote_row
from leasing_desk.services.reporting import (
    ExecutiveActivity,
    ReportingService,
    StaleTrend,
    StockSummary,
    TrendPoint,
)

__all__ = [
    "AlertService",
    "CommitmentService",
    "ExecutiveActivity",
    "LeaseResolutionCoordinator",
    "PortfolioService",
    "PropertySaveResult",
    "PropertyStatusAutomaton",
    "ReferenceValue",
    "ReferenceValueService",
    "RemotePropertySource",
    "ReportingService",
    "StaleTrend",
    "StockSummary",
    "TrendPoint",
    "expire_notice",
    "find_commitment_alerts",
    "find_stale_properties",
    "format_clp",
    "format_uf",
    "map_remote_row",
    "uf_to_clp",
]
