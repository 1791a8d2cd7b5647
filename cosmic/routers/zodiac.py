from fastapi import APIRouter

from ..services.aspects import aspect_kind_list
from ..services.constants import sign_list
from ..services.ephem import planet_list

router = APIRouter(prefix="/v2", tags=["zodiac"])


@router.get("/zodiac/signs")
def zodiac_signs():
    return sign_list()


@router.get("/planets")
def planets():
    return planet_list()


@router.get("/aspects")
def aspects():
    return aspect_kind_list()
