"""Prometheus metrics endpoint for observability.

Endpoints:
    GET /metrics - Prometheus scrape endpoint

Metrics Exposed:
    Export Metrics:
        - export_requests_total - Export requests by format and outcome
        - export_records_total - Result records written to artifacts
        - export_pages_total - Result pages fetched
        - export_duration_seconds - Time to build a ready-to-serve archive
        - export_archive_bytes - Compressed archive sizes

Example Prometheus Configuration:
    ```yaml
    scrape_configs:
      - job_name: 'result-service'
        static_configs:
          - targets: ['localhost:8000']
        metrics_path: '/metrics'
        scrape_interval: 15s
    ```
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from result_service.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics")
async def metrics() -> Response:
    """Expose Prometheus metrics in text exposition format.

    Returns:
        Response with the export metrics of this process.
    """
    data = generate_latest(REGISTRY)
    return Response(
        content=data,
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
