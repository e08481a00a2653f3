"""Baby API routes."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from babyspa.database import get_db
from babyspa.models.baby import Baby
from babyspa.schemas.baby import BabyCreate, BabyRead

router = APIRouter(prefix="/api/babies", tags=["babies"])


@router.post("", response_model=BabyRead, status_code=201)
async def create_baby(
    body: BabyCreate,
    session: AsyncSession = Depends(get_db),
) -> Baby:
    baby = Baby(name=body.name, birth_date=body.birth_date)
    session.add(baby)
    await session.commit()
    await session.refresh(baby)
    return baby


@router.get("/{baby_id}", response_model=BabyRead)
async def get_baby(
    baby_id: int,
    session: AsyncSession = Depends(get_db),
) -> Baby:
    baby = await session.get(Baby, baby_id)
    if baby is None:
        raise HTTPException(status_code=404, detail="BABY_NOT_FOUND")
    return baby
