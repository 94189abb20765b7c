from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse


def build_usage_text(*, enable_image: bool) -> str:
    lines = [
        "gridslice: read-only access to one gridded dataset",
        "",
        "GET /get-info                 dimensions and variables",
        "GET /get-data?t=<int>&z=<int>  concentration slice as JSON",
    ]
    if enable_image:
        lines.append("GET /get-image?t=<int>&z=<int> concentration slice as grayscale PNG")
    return "\n".join(lines) + "\n"


def build_core_router(
    *,
    dataset,
    enable_image: bool,
    build_status_payload,
    started_at,
):
    router = APIRouter()
    usage = build_usage_text(enable_image=enable_image)

    @router.get("/", response_class=PlainTextResponse)
    def index():
        return usage

    @router.get("/get-info")
    def get_info():
        return dataset.describe()

    @router.get("/api/health")
    async def health():
        return {"status": "ok", "dimensions": dataset.list_dimensions(), "imageRoute": enable_image}

    @router.get("/api/status")
    async def api_status():
        return build_status_payload(
            started_at=started_at,
            dimensions=dataset.list_dimensions(),
            image_route=enable_image,
        )

    return router
