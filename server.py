"""
Unctico Web Server

FastAPI-based web server exposing the client safety engine.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

# Setup paths
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from unctico.errors import AlertNotFoundError, ConfigurationError, RepositoryError  # noqa: E402
from unctico.exporters import alert_summary, export_markdown, red_flag_summary  # noqa: E402
from unctico.models import (  # noqa: E402
    ContraindicationAlert,
    ContraindicationCondition,
    ContraindicationStatistics,
    RedFlagAlert,
    RedFlagStatistics,
    RedFlagSymptom,
    Severity,
)
from unctico.service import SafetyService  # noqa: E402


# Request/Response models
class DetectRequest(BaseModel):
    """Request model for contraindication detection."""
    conditions: list[str] = Field(default_factory=list, description="Medical history lines")
    medications: list[str] = Field(default_factory=list, description="Current medications")
    save: bool = Field(False, description="Add detected alerts to the client's record")


class ContraindicationRequest(BaseModel):
    """Request model for manual contraindication entry."""
    client_id: str
    condition: ContraindicationCondition
    severity: Optional[Severity] = Field(None, description="Defaults to the condition's severity")
    notes: str = ""


class ResolveRequest(BaseModel):
    action_taken: str = Field(min_length=1, description="What was done to resolve the alert")


class RedFlagRequest(BaseModel):
    """Request model for recording a red flag."""
    client_id: str
    symptom: RedFlagSymptom
    notes: str = ""
    action_taken: Optional[str] = None
    was_referred: bool = False
    referral_details: Optional[str] = None


class ClearanceResponse(BaseModel):
    client_id: str
    can_proceed: bool
    blocking_alerts: list[dict]
    active_alerts: list[dict]
    physician_clearance_required: list[str]


class StatisticsResponse(BaseModel):
    contraindications: ContraindicationStatistics
    red_flags: RedFlagStatistics


def get_service(request: Request) -> SafetyService:
    """Service for this app, built from configuration on first use."""
    service = getattr(request.app.state, "service", None)
    if service is None:
        try:
            service = SafetyService.from_config()
        except ConfigurationError as e:
            raise HTTPException(status_code=503, detail=f"Storage not configured: {e}")
        except RepositoryError as e:
            raise HTTPException(status_code=503, detail=f"Alert storage unavailable: {e}")
        request.app.state.service = service
    return service


def create_app(service: Optional[SafetyService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Safety service to serve. If None, one is built from
            configuration on the first request.
    """
    app = FastAPI(
        title="Unctico",
        description="Unctico - Client Safety API",
        version="0.1.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.service = service

    @app.exception_handler(RepositoryError)
    async def repository_error(request: Request, exc: RepositoryError):
        return JSONResponse(status_code=503, content={"detail": f"Alert storage unavailable: {exc}"})

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now().isoformat()}

    @app.get("/api/conditions")
    async def list_conditions():
        """List the contraindication catalogue."""
        return [
            {
                "key": c.value,
                "name": c.display_name,
                "category": c.category.value,
                "default_severity": c.default_severity.value,
                "requires_physician_clearance": c.requires_physician_clearance,
                "recommendations": c.recommendations,
            }
            for c in ContraindicationCondition
        ]

    @app.get("/api/red-flags/symptoms")
    async def list_symptoms():
        """List red-flag symptoms, most urgent first."""
        return [
            {
                "key": s.value,
                "name": s.display_name,
                "category": s.category.value,
                "urgency": s.urgency.value,
                "recommended_action": s.recommended_action,
            }
            for s in sorted(RedFlagSymptom, key=lambda s: s.urgency.rank, reverse=True)
        ]

    @app.post("/api/clients/{client_id}/detect", response_model=list[ContraindicationAlert])
    async def detect(client_id: str, request: DetectRequest, service: SafetyService = Depends(get_service)):
        """
        Detect contraindications from medical history.

        With ``save`` the alerts are added to the client's record.
        """
        return service.detect(client_id, request.conditions, request.medications, save=request.save)

    @app.get("/api/clients/{client_id}/contraindications", response_model=list[ContraindicationAlert])
    async def client_contraindications(
        client_id: str,
        active_only: bool = Query(True, description="Hide resolved alerts"),
        service: SafetyService = Depends(get_service),
    ):
        if active_only:
            return service.store.active_for_client(client_id)
        return service.store.for_client(client_id)

    @app.post("/api/contraindications", response_model=ContraindicationAlert, status_code=201)
    async def record_contraindication(
        request: ContraindicationRequest,
        service: SafetyService = Depends(get_service),
    ):
        return service.record_contraindication(
            request.client_id, request.condition, request.severity, request.notes,
        )

    @app.post("/api/contraindications/{alert_id}/resolve", response_model=ContraindicationAlert)
    async def resolve_contraindication(
        alert_id: str,
        request: ResolveRequest,
        service: SafetyService = Depends(get_service),
    ):
        try:
            return service.resolve(alert_id, request.action_taken)
        except AlertNotFoundError:
            raise HTTPException(status_code=404, detail="Active contraindication not found")

    @app.get("/api/clients/{client_id}/clearance", response_model=ClearanceResponse)
    async def clearance(client_id: str, service: SafetyService = Depends(get_service)):
        """Pre-session safety gate."""
        result = service.clearance(client_id)
        return ClearanceResponse(
            client_id=client_id,
            can_proceed=result.allowed,
            blocking_alerts=[alert_summary(a) for a in result.blocking_alerts],
            active_alerts=[alert_summary(a) for a in result.active_alerts],
            physician_clearance_required=[c.value for c in result.physician_clearance_required],
        )

    @app.post("/api/red-flags", response_model=RedFlagAlert, status_code=201)
    async def record_red_flag(request: RedFlagRequest, service: SafetyService = Depends(get_service)):
        return service.record_red_flag(
            request.client_id,
            request.symptom,
            notes=request.notes,
            action_taken=request.action_taken,
            was_referred=request.was_referred,
            referral_details=request.referral_details,
        )

    @app.get("/api/clients/{client_id}/red-flags")
    async def client_red_flags(client_id: str, service: SafetyService = Depends(get_service)):
        flags = service.store.red_flags_for_client(client_id)
        flags.sort(key=lambda f: f.urgency.rank, reverse=True)
        return [red_flag_summary(f) for f in flags]

    @app.get("/api/statistics", response_model=StatisticsResponse)
    async def statistics(service: SafetyService = Depends(get_service)):
        return StatisticsResponse(
            contraindications=service.contraindication_statistics(),
            red_flags=service.red_flag_statistics(),
        )

    @app.get("/api/clients/{client_id}/report", response_class=PlainTextResponse)
    async def report(client_id: str, service: SafetyService = Depends(get_service)):
        """Markdown safety report for a client."""
        return export_markdown(service.clearance(client_id), service.store.red_flags_for_client(client_id))

    return app


app = create_app()


def run_server(host: str = "0.0.0.0", port: int = 8000):
    """Run the server."""
    import uvicorn
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
