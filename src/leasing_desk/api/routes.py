"""API routes for Leasing Desk."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Query, Response, status

from leasing_desk import __version__
from leasing_desk.api.schemas import (
    ActionHistoryItemResponse,
    AlertReportResponse,
    CommitmentAlertResponse,
    ExecutiveActivityResponse,
    HealthResponse,
    LeaseResolutionResponse,
    PropertyCreate,
    PropertyDeleteResponse,
    PropertyResponse,
    PropertySaveResponse,
    PropertyWrite,
    ReferenceValueResponse,
    ScheduleActionRequest,
    StalePropertyResponse,
    StaleTrendResponse,
    StockSummaryResponse,
    TrendPointResponse,
    VisitCreate,
    VisitResponse,
)
from leasing_desk.container import (
    get_alert_service,
    get_commitment_service,
    get_lease_coordinator,
    get_portfolio_service,
    get_reference_value_service,
    get_reporting_service,
)
from leasing_desk.domain.lease_resolution import LeaseResolution
from leasing_desk.domain.properties import (
    Available,
    Leased,
    NoticeGiven,
    Property,
    build_status_details,
)
from leasing_desk.domain.team import role_can_delete_properties
from leasing_desk.domain.value_objects import LeaseType, PropertyStatus, UserRole
from leasing_desk.domain.visits import Visit
from leasing_desk.exceptions import PermissionDeniedError
from leasing_desk.services.alerts import AlertService
from leasing_desk.services.commitments import CommitmentService
from leasing_desk.services.lease_resolution import LeaseResolutionCoordinator
from leasing_desk.services.portfolio import PortfolioService, PropertySaveResult
from leasing_desk.services.reference_value import ReferenceValueService
from leasing_desk.services.reporting import ReportingService

# Create routers
health_router = APIRouter(tags=["health"])
property_router = APIRouter(prefix="/properties", tags=["properties"])
visit_router = APIRouter(prefix="/visits", tags=["visits"])
lease_router = APIRouter(prefix="/lease-resolutions", tags=["lease-resolutions"])
alert_router = APIRouter(prefix="/alerts", tags=["alerts"])
report_router = APIRouter(prefix="/reports", tags=["reports"])
reference_router = APIRouter(prefix="/reference", tags=["reference"])

Portfolio = Annotated[PortfolioService, Depends(get_portfolio_service)]
Commitments = Annotated[CommitmentService, Depends(get_commitment_service)]
Coordinator = Annotated[LeaseResolutionCoordinator, Depends(get_lease_coordinator)]
Alerts = Annotated[AlertService, Depends(get_alert_service)]
Reporting = Annotated[ReportingService, Depends(get_reporting_service)]
ReferenceValues = Annotated[ReferenceValueService, Depends(get_reference_value_service)]


# Helper functions
def _property_to_response(prop: Property, today: date) -> PropertyResponse:
    """Convert Property domain object to response schema."""
    details = prop.status_details
    response = PropertyResponse(
        id=prop.id,
        address=prop.address,
        commune=prop.commune,
        property_type=prop.property_type,
        owner=prop.owner,
        condominium=prop.condominium,
        price_uf=str(prop.price_uf),
        land_m2=str(prop.land_m2),
        built_m2=str(prop.built_m2),
        storage_m2=str(prop.storage_m2),
        status=prop.status.value,
        days_vacant=prop.days_vacant(today),
        days_to_handover=prop.days_to_handover(today),
        created_at=prop.created_at,
        updated_at=prop.updated_at,
    )
    match details:
        case Available():
            response.vacancy_start_date = details.vacancy_start_date
        case NoticeGiven():
            response.notice_end_date = details.notice_end_date
        case Leased():
            response.current_tenant = details.current_tenant
            response.lease_start_date = details.lease_start_date
            response.lease_end_date = details.lease_end_date
            response.lease_type = details.lease_type.value
    return response


def _payload_to_property(payload: PropertyWrite, property_id: str | None) -> Property:
    """Convert a write payload to a Property domain object."""
    details = build_status_details(
        PropertyStatus(payload.status),
        vacancy_start_date=payload.vacancy_start_date,
        notice_end_date=payload.notice_end_date,
        current_tenant=payload.current_tenant,
        lease_start_date=payload.lease_start_date,
        lease_end_date=payload.lease_end_date,
        lease_type=LeaseType(payload.lease_type) if payload.lease_type else None,
    )
    return Property(
        id=property_id or "",
        address=payload.address,
        commune=payload.commune,
        property_type=payload.property_type,
        owner=payload.owner,
        condominium=payload.condominium or None,
        price_uf=payload.price_uf,
        land_m2=payload.land_m2,
        built_m2=payload.built_m2,
        storage_m2=payload.storage_m2,
        status_details=details,
    )


def _visit_to_response(visit: Visit) -> VisitResponse:
    """Convert Visit domain object to response schema."""
    return VisitResponse(
        id=visit.id,
        property_id=visit.property_id,
        visit_date=visit.visit_date,
        executive_name=visit.executive_name,
        client_name=visit.client_name,
        client_phone=visit.client_phone,
        client_email=visit.client_email,
        offer_uf=str(visit.offer_uf) if visit.offer_uf is not None else None,
        has_broker=visit.has_broker,
        broker_name=visit.broker_name,
        comments=visit.comments,
        next_action=visit.next_action,
        next_action_date=visit.next_action_date,
        action_status=visit.action_status.value,
        action_completed_date=visit.action_completed_date,
        closure_reason=visit.closure_reason.value if visit.closure_reason else None,
        history=[
            ActionHistoryItemResponse(
                action=item.action,
                scheduled_date=item.scheduled_date,
                status=item.status.value,
                archived_date=item.archived_date,
                completed_date=item.completed_date,
                note=item.note,
                closure_reason=item.closure_reason.value if item.closure_reason else None,
            )
            for item in visit.history
        ],
        created_at=visit.created_at,
    )


def _resolution_to_response(resolution: LeaseResolution, today: date) -> LeaseResolutionResponse:
    return LeaseResolutionResponse(
        id=resolution.id,
        property_id=resolution.property_id,
        state=resolution.state.value,
        winner_name=resolution.winner_name,
        previous_status=resolution.previous_status.value if resolution.previous_status else None,
        pending_winner_visit_ids=list(resolution.pending_winner_visit_ids),
        auto_closed_visit_ids=list(resolution.auto_closed_visit_ids),
        property=_property_to_response(resolution.property, today),
        created_at=resolution.created_at,
        closed_at=resolution.closed_at,
    )


def _save_to_response(
    result: PropertySaveResult, today: date, response: Response, created_status: int
) -> PropertySaveResponse:
    if result.resolution is not None:
        response.status_code = status.HTTP_202_ACCEPTED
        return PropertySaveResponse(
            property=_property_to_response(result.property, today),
            held=True,
            lease_resolution=_resolution_to_response(result.resolution, today),
        )
    response.status_code = created_status
    return PropertySaveResponse(property=_property_to_response(result.property, today))


def _require_delete_permission(role: str | None) -> None:
    try:
        user_role = UserRole((role or "").strip().upper())
    except ValueError:
        raise PermissionDeniedError("delete properties", role or "anonymous") from None
    if not role_can_delete_properties(user_role):
        raise PermissionDeniedError("delete properties", user_role.value)


# Health endpoint
@health_router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


# Property endpoints
@property_router.get("", response_model=list[PropertyResponse])
def list_properties(
    portfolio: Portfolio,
    status_filter: Annotated[
        str | None, Query(alias="status", pattern=r"^(AVAILABLE|LEASED|NOTICE_GIVEN)$")
    ] = None,
) -> list[PropertyResponse]:
    """List properties after expiring ended notice periods."""
    wanted = PropertyStatus(status_filter) if status_filter else None
    today = portfolio.today()
    return [_property_to_response(p, today) for p in portfolio.list_properties(wanted)]


@property_router.get("/{property_id}", response_model=PropertyResponse)
def get_property(property_id: str, portfolio: Portfolio) -> PropertyResponse:
    return _property_to_response(portfolio.get_property(property_id), portfolio.today())


@property_router.post(
    "",
    response_model=PropertySaveResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_property(
    payload: PropertyCreate, response: Response, portfolio: Portfolio
) -> PropertySaveResponse:
    """Create a property, or replace it when ``id`` names an existing one.

    Returns 202 when the save is held by a lease resolution.
    """
    result = portfolio.save_property(_payload_to_property(payload, payload.id))
    return _save_to_response(result, portfolio.today(), response, status.HTTP_201_CREATED)


@property_router.put("/{property_id}", response_model=PropertySaveResponse)
def update_property(
    property_id: str, payload: PropertyWrite, response: Response, portfolio: Portfolio
) -> PropertySaveResponse:
    """Replace an existing property. Returns 202 when held by a lease resolution."""
    portfolio.get_property(property_id)
    result = portfolio.save_property(_payload_to_property(payload, property_id))
    return _save_to_response(result, portfolio.today(), response, status.HTTP_200_OK)


@property_router.delete("/{property_id}", response_model=PropertyDeleteResponse)
def delete_property(
    property_id: str,
    portfolio: Portfolio,
    x_user_role: Annotated[str | None, Header()] = None,
) -> PropertyDeleteResponse:
    """Delete a property and its visits. Requires the admin role."""
    _require_delete_permission(x_user_role)
    properties, visits = portfolio.delete_property(property_id)
    today = portfolio.today()
    return PropertyDeleteResponse(
        deleted_id=property_id,
        properties=[_property_to_response(p, today) for p in properties],
        visits=[_visit_to_response(v) for v in visits],
    )


# Visit endpoints
@visit_router.get("", response_model=list[VisitResponse])
def list_visits(
    portfolio: Portfolio,
    property_id: Annotated[str | None, Query()] = None,
    client_name: Annotated[str | None, Query()] = None,
) -> list[VisitResponse]:
    visits = portfolio.list_visits(property_id=property_id, client_name=client_name)
    return [_visit_to_response(v) for v in visits]


@visit_router.get("/{visit_id}", response_model=VisitResponse)
def get_visit(visit_id: str, portfolio: Portfolio) -> VisitResponse:
    return _visit_to_response(portfolio.get_visit(visit_id))


@visit_router.post("", response_model=VisitResponse, status_code=status.HTTP_201_CREATED)
def create_visit(payload: VisitCreate, portfolio: Portfolio) -> VisitResponse:
    visit = Visit(
        property_id=payload.property_id,
        visit_date=payload.visit_date,
        executive_name=payload.executive_name,
        client_name=payload.client_name,
        client_phone=payload.client_phone,
        client_email=payload.client_email,
        offer_uf=payload.offer_uf,
        has_broker=payload.has_broker,
        broker_name=payload.broker_name if payload.has_broker else None,
        comments=payload.comments,
        next_action=payload.next_action,
        next_action_date=payload.next_action_date,
    )
    return _visit_to_response(portfolio.add_visit(visit))


@visit_router.post("/{visit_id}/done", response_model=VisitResponse)
def mark_visit_done(visit_id: str, commitments: Commitments) -> VisitResponse:
    """Mark the visit's active commitment as done."""
    return _visit_to_response(commitments.mark_done(visit_id))


@visit_router.post("/{visit_id}/actions", response_model=VisitResponse)
def schedule_visit_action(
    visit_id: str, payload: ScheduleActionRequest, commitments: Commitments
) -> VisitResponse:
    """Archive the active commitment and schedule a new one."""
    visit = commitments.schedule_new_action(
        visit_id, payload.action, payload.action_date, payload.note
    )
    return _visit_to_response(visit)


# Lease resolution endpoints
@lease_router.get("/{resolution_id}", response_model=LeaseResolutionResponse)
def get_lease_resolution(
    resolution_id: str, coordinator: Coordinator, portfolio: Portfolio
) -> LeaseResolutionResponse:
    return _resolution_to_response(coordinator.get(resolution_id), portfolio.today())


@lease_router.post(
    "/{resolution_id}/visits/{visit_id}/resolve",
    response_model=LeaseResolutionResponse,
)
def resolve_winner_commitment(
    resolution_id: str, visit_id: str, coordinator: Coordinator, portfolio: Portfolio
) -> LeaseResolutionResponse:
    resolution = coordinator.resolve_winner_commitment(resolution_id, visit_id)
    return _resolution_to_response(resolution, portfolio.today())


@lease_router.post("/{resolution_id}/commit", response_model=LeaseResolutionResponse)
def commit_lease_resolution(
    resolution_id: str, coordinator: Coordinator, portfolio: Portfolio
) -> LeaseResolutionResponse:
    return _resolution_to_response(coordinator.commit(resolution_id), portfolio.today())


@lease_router.post("/{resolution_id}/cancel", response_model=LeaseResolutionResponse)
def cancel_lease_resolution(
    resolution_id: str, coordinator: Coordinator, portfolio: Portfolio
) -> LeaseResolutionResponse:
    return _resolution_to_response(coordinator.cancel(resolution_id), portfolio.today())


# Alert endpoints
@alert_router.get("", response_model=AlertReportResponse)
def get_alerts(alerts: Alerts) -> AlertReportResponse:
    """Stale properties and commitment alerts, recomputed on every call."""
    report = alerts.get_alerts()
    return AlertReportResponse(
        as_of=alerts.today(),
        total=report.total,
        urgent_count=report.urgent_count,
        stale_properties=[
            StalePropertyResponse(
                property_id=s.property.id,
                address=s.property.address,
                status=s.property.status.value,
                reference_date=s.reference_date,
                days_inactive=s.days_inactive,
                last_visit_date=s.last_visit_date,
            )
            for s in report.stale_properties
        ],
        action_alerts=[
            CommitmentAlertResponse(
                visit_id=a.visit.id,
                property_id=a.visit.property_id,
                client_name=a.visit.client_name,
                executive_name=a.visit.executive_name,
                next_action=a.visit.next_action,
                next_action_date=a.visit.next_action_date,
                days_left=a.days_left,
                level=a.level.value,
            )
            for a in report.action_alerts
        ],
    )


# Report endpoints
@report_router.get("/stock", response_model=StockSummaryResponse)
def stock_report(reporting: Reporting) -> StockSummaryResponse:
    return StockSummaryResponse.model_validate(reporting.stock_summary())


@report_router.get("/executives", response_model=list[ExecutiveActivityResponse])
def executive_report(reporting: Reporting) -> list[ExecutiveActivityResponse]:
    return [
        ExecutiveActivityResponse.model_validate(a) for a in reporting.executive_activity()
    ]


@report_router.get("/stale-trend", response_model=StaleTrendResponse)
def stale_trend_report(
    reporting: Reporting,
    points: Annotated[int, Query(ge=1, le=52)] = 5,
) -> StaleTrendResponse:
    trend = reporting.stale_trend(points)
    return StaleTrendResponse(
        points=[TrendPointResponse.model_validate(p) for p in trend.points],
        current=trend.current,
        recovered=trend.recovered,
    )


@report_router.get("/recent-visits", response_model=list[VisitResponse])
def recent_visits_report(
    reporting: Reporting,
    days: Annotated[int, Query(ge=1, le=365)] = 7,
) -> list[VisitResponse]:
    return [_visit_to_response(v) for v in reporting.recent_visits(days)]


# Reference value endpoints
@reference_router.get("/uf", response_model=ReferenceValueResponse)
async def reference_uf(reference_values: ReferenceValues) -> ReferenceValueResponse:
    """Current UF value, or ``available=false`` when the source is down."""
    reference = await reference_values.current_or_none()
    if reference is None:
        return ReferenceValueResponse(available=False)
    return ReferenceValueResponse(
        available=True, value=str(reference.value), as_of=reference.as_of
    )
