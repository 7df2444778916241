from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict[str, object]:
    registry = request.app.state.sse_registry
    return {"status": "ok", "sse_clients": registry.count()}
