"""Application service layer for cost-center reports."""
from __future__ import annotations

import logging
import os
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable

from cost_center_report.core.aggregate import build_parsed_data, resource_counts, resources_by_type
from cost_center_report.core.errors import (
    ConfigurationError,
    DatasetNotLoaded,
    ReportError,
    StaleResponseError,
)
from cost_center_report.core.filters import FilterOptions, filter_and_sort, has_active_filters
from cost_center_report.core.sample import sample_document
from cost_center_report.core.schema import APIConfig, CostCenter, ParsedData
from cost_center_report.core.storage import kv_path
from cost_center_report.core.validation import load_document, validate_document
from cost_center_report.domain import DatasetState
from cost_center_report.exporters.csv_report import build_csv_report
from cost_center_report.exporters.json_report import build_json_report
from cost_center_report.exporters.naming import EXPORT_FORMATS, report_filename
from cost_center_report.infrastructure import (
    CredentialStore,
    GitHubBillingClient,
    JsonFileKeyValueStore,
    mask_token,
)
from cost_center_report.infrastructure.github_billing import DEFAULT_API_BASE

logger = logging.getLogger(__name__)


class ReportService:
    """Owns the current dataset and coordinates loading, viewing and exporting it."""

    def __init__(
        self,
        credentials: CredentialStore,
        billing_client: GitHubBillingClient,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._credentials = credentials
        self._billing_client = billing_client
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._state = DatasetState()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # dataset lifecycle
    # ------------------------------------------------------------------
    def _begin_request(self) -> int:
        with self._lock:
            self._state.request_token += 1
            return self._state.request_token

    def _commit(self, token: int, data: ParsedData | None, *, source: str, filename: str | None) -> None:
        with self._lock:
            if token != self._state.request_token:
                logger.info("Discarding stale %s result (request %s superseded by %s)", source, token, self._state.request_token)
                raise StaleResponseError("A newer dataset was loaded while this request was in flight")
            self._state.data = data
            self._state.source = source if data is not None else None
            self._state.filename = filename if data is not None else None
            self._state.loaded_at = self._clock() if data is not None else None

    def _discard(self, token: int) -> None:
        with self._lock:
            if token == self._state.request_token:
                self._state = DatasetState(request_token=token)

    def _load(self, token: int, loader: Callable[[], ParsedData], *, source: str, filename: str | None) -> ParsedData:
        try:
            data = loader()
        except ReportError as exc:
            logger.warning("Loading %s dataset failed: %s", source, exc)
            self._discard(token)
            raise
        self._commit(token, data, source=source, filename=filename)
        summary = data.summary
        logger.info(
            "Loaded %s cost centers from %s (%s active, %s deleted)",
            len(data.cost_centers),
            source,
            summary.total_active,
            summary.total_deleted,
        )
        return data

    def load_upload(self, filename: str, content: bytes) -> ParsedData:
        token = self._begin_request()
        return self._load(token, lambda: load_document(content), source="upload", filename=filename)

    def load_example(self) -> ParsedData:
        token = self._begin_request()
        return self._load(
            token,
            lambda: build_parsed_data(validate_document(sample_document())),
            source="example",
            filename=None,
        )

    def fetch_remote(self) -> ParsedData:
        config = self._credentials.load()
        if config is None:
            raise ConfigurationError("Please configure your GitHub API token and enterprise slug first")
        return self._fetch_with(config)

    def _fetch_with(self, config: APIConfig) -> ParsedData:
        token = self._begin_request()

        def loader() -> ParsedData:
            raw = self._billing_client.fetch_cost_centers(config)
            return build_parsed_data(validate_document(raw))

        return self._load(token, loader, source="api", filename=None)

    def clear_dataset(self) -> None:
        token = self._begin_request()
        self._commit(token, None, source="clear", filename=None)

    def _snapshot(self) -> DatasetState:
        with self._lock:
            state = replace(self._state)
        if state.data is None:
            raise DatasetNotLoaded("No cost center data loaded")
        return state

    def current(self) -> ParsedData:
        return self._snapshot().data

    # ------------------------------------------------------------------
    # credentials
    # ------------------------------------------------------------------
    def save_config(self, token: str, enterprise: str) -> APIConfig:
        return self._credentials.save(token, enterprise)

    def save_config_and_fetch(self, token: str, enterprise: str) -> ParsedData:
        config = self._credentials.save(token, enterprise)
        return self._fetch_with(config)

    def clear_config(self) -> None:
        self._credentials.clear()

    def get_config_status(self) -> dict[str, Any]:
        config = self._credentials.load()
        if config is None:
            return {"configured": False, "enterprise": None, "token": None}
        return {"configured": True, "enterprise": config.enterprise, "token": mask_token(config.token)}

    # ------------------------------------------------------------------
    # views
    # ------------------------------------------------------------------
    def overview(self) -> dict[str, Any]:
        state = self._snapshot()
        data = state.data
        return {
            "source": state.source,
            "filename": state.filename,
            "loaded_at": state.loaded_at.isoformat() if state.loaded_at else None,
            "summary": data.summary.model_dump(by_alias=True),
            "deletedCostCenters": [serialise_row(center) for center in data.deleted_cost_centers],
        }

    def list_cost_centers(self, options: FilterOptions) -> dict[str, Any]:
        data = self.current()
        rows = filter_and_sort(data.active_cost_centers, options)
        return {
            "items": [serialise_row(center) for center in rows],
            "total": len(data.active_cost_centers),
            "filtered": len(rows),
            "has_active_filters": has_active_filters(options),
            "options": options.model_dump(),
        }

    def get_cost_center(self, center_id: str) -> dict[str, Any] | None:
        data = self.current()
        for center in data.cost_centers:
            if center.id == center_id:
                grouped = resources_by_type(center)
                detail = serialise_row(center)
                detail["resourcesByType"] = {
                    key: [resource.model_dump() for resource in items] for key, items in grouped.items()
                }
                return detail
        return None

    def export(self, fmt: str) -> tuple[bytes, str, str]:
        """Return the export payload, its filename and media type."""

        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"unsupported export format: {fmt}")
        data = self.current()
        now = self._clock()
        payload = build_json_report(data, now) if fmt == "json" else build_csv_report(data)
        logger.info("Exported %s report with %s cost centers", fmt, len(data.cost_centers))
        return payload, report_filename(fmt, now), EXPORT_FORMATS[fmt]

    # ------------------------------------------------------------------
    # teardown
    # ------------------------------------------------------------------
    def reset(self) -> None:
        with self._lock:
            # a fresh token still supersedes any request in flight
            self._state = DatasetState(request_token=self._state.request_token + 1)

    def close(self) -> None:
        self._billing_client.close()


def serialise_row(center: CostCenter) -> dict[str, Any]:
    row = center.model_dump(mode="json")
    row["resourceCounts"] = resource_counts(center).model_dump()
    row["totalResources"] = len(center.resources)
    return row


def _build_default_service() -> ReportService:
    credentials = CredentialStore(JsonFileKeyValueStore(kv_path()))
    client = GitHubBillingClient(
        api_base=os.getenv("GITHUB_API_BASE") or DEFAULT_API_BASE,
        timeout=float(os.getenv("GITHUB_API_TIMEOUT") or 30.0),
    )
    return ReportService(credentials, client)


_service: ReportService | None = None


def get_report_service() -> ReportService:
    """Return the singleton report service for the process."""

    global _service
    if _service is None:
        _service = _build_default_service()
    return _service


def configure_report_service(service: ReportService | None) -> None:
    """Install the service used by the HTTP routes (``None`` rebuilds from the environment)."""

    global _service
    _service = service


def reset_report_state() -> None:
    """Reset the in-memory dataset (used in tests)."""

    if _service is not None:
        _service.reset()


def close_report_service() -> None:
    """Release the HTTP client held by the installed service and forget it."""

    global _service
    if _service is not None:
        _service.close()
        _service = None
