import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Body, Path

from ..schemas import BirthChartInput, BirthChartOut, TransitsResponse, SynastryResponse
from ..services.chart_builder import chart_view, create_or_update_chart, get_birth_chart
from ..services.chart_store import CHARTS, PROFILES
from ..services.compatibility_engine import synastry, synastry_view
from ..services.transits_engine import compute_transits, snapshot_view

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v2/birth-charts", tags=["birth-charts"])


@router.post("/{user_id}", response_model=BirthChartOut, status_code=201)
async def create_birth_chart(
    user_id: int = Path(..., gt=0),
    req: BirthChartInput = Body(
        ...,
        example={
            "birth_date": "1990-08-18",
            "birth_time": "14:32",
            "birth_timezone": "Asia/Kolkata",
            "birth_time_accuracy": "exact",
            "birth_city": "Hyderabad",
            "birth_country": "India",
            "latitude": 17.385,
            "longitude": 78.4867,
        },
    ),
):
    chart = await create_or_update_chart(user_id, req.model_dump(), CHARTS, PROFILES)
    logger.info("Birth chart stored for user %s", user_id)
    return chart_view(chart)


@router.get("/{user_id}", response_model=BirthChartOut)
async def read_birth_chart(user_id: int = Path(..., gt=0)):
    return chart_view(await get_birth_chart(user_id, CHARTS))


@router.get("/{user_id}/transits", response_model=TransitsResponse)
async def read_transits(user_id: int = Path(..., gt=0)):
    natal = await get_birth_chart(user_id, CHARTS)
    now = datetime.now(timezone.utc)
    snapshots = [snapshot_view(s) for s in compute_transits(natal, now)]
    return TransitsResponse(
        current_date=now.isoformat(),
        transits=snapshots,
        significant=[s for s in snapshots if s["aspect"] is not None],
    )


@router.get("/{user_id}/synastry/{other_user_id}", response_model=SynastryResponse)
async def read_synastry(user_id: int = Path(..., gt=0), other_user_id: int = Path(..., gt=0)):
    chart_a = await get_birth_chart(user_id, CHARTS)
    chart_b = await get_birth_chart(other_user_id, CHARTS)
    return synastry_view(synastry(chart_a, chart_b))
