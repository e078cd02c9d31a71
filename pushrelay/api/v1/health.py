from fastapi import APIRouter

from pushrelay.api.deps import RelayDep

router = APIRouter()


@router.get("/", summary="Health check", tags=["health"])
def read_health(relay: RelayDep) -> dict:
    """Return basic service health information."""
    return {"status": "ok", "subscriptions": relay.registry.count()}
