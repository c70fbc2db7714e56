from fastapi import APIRouter

router = APIRouter(prefix="/utils", tags=["utils"])


@router.get("/liveness/")
async def liveness() -> bool:
    """
    Liveness probe: the process is up and serving requests. No I/O.
    """
    return True
