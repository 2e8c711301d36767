from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tempest.core.db import get_db
from tempest.core.exceptions import StorageError
from tempest.repositories.observation_repository import ObservationRepository
from tempest.schemas.weather import Weather

router = APIRouter(prefix="/weather", tags=["Weather"])


@router.get(
    "/latest",
    response_model=Weather,
    summary="Latest weather observation",
    description="Returns the most recently stored observation, or 404 if none has been stored yet.",
)
async def get_latest_weather(db: AsyncSession = Depends(get_db)) -> Weather:
    weather = await ObservationRepository(db).get_latest()
    if weather is None:
        raise HTTPException(status_code=404, detail="No weather observations found.")
    return weather


@router.get(
    "",
    response_model=list[Weather],
    summary="Recent weather observations",
    description="Returns up to `limit` stored observations, newest first.",
)
async def list_weather(
    limit: int = Query(default=10, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
) -> list[Weather]:
    return await ObservationRepository(db).list_latest(limit)


@router.post(
    "",
    response_model=Weather,
    status_code=status.HTTP_201_CREATED,
    summary="Store a weather observation",
    description=(
        "Stores an already normalized observation. The body is validated strictly: "
        "`precip_type` must be one of 0, 1, 2 or 3."
    ),
)
async def post_weather(weather: Weather, db: AsyncSession = Depends(get_db)) -> Weather:
    """
    Append an observation forwarded by another listener.
    """
    try:
        await ObservationRepository(db).insert(weather)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return weather
