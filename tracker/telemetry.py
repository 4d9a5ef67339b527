"""OpenTelemetry metrics and logs for the portfolio tracker."""

import logging

from opentelemetry import metrics
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from tracker._version import VERSION


# Module-level state
_initialized = False
_meter = None
_log_handler = None

# Counters (cumulative)
_holdings_changes_total = None
_growth_entries_total = None
_snapshots_total = None
_errors_total = None

# Latest summary values, exported through observable gauges
_net_worth: float | None = None
_unrealized_gain_loss: float | None = None
_allocation_variance: dict[str, float] = {}


def setup_telemetry(enabled: bool, endpoint: str, export_interval: int) -> bool:
    """Initialize OpenTelemetry metrics and log export.

    Returns True if telemetry was initialized, False if disabled.
    """
    global _initialized, _meter, _log_handler
    global _holdings_changes_total, _growth_entries_total, _snapshots_total, _errors_total

    if _initialized:
        return True

    if not enabled:
        return False

    resource = Resource.create({
        "service.name": "portfolio-tracker",
        "service.version": VERSION,
    })

    exporter = OTLPMetricExporter(endpoint=endpoint)
    reader = PeriodicExportingMetricReader(
        exporter,
        export_interval_millis=export_interval,
    )
    provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(provider)

    _meter = metrics.get_meter("portfolio_tracker", VERSION)

    _holdings_changes_total = _meter.create_counter(
        "tracker_holdings_changes_total",
        description="Holdings created, updated or deleted",
        unit="1",
    )
    _growth_entries_total = _meter.create_counter(
        "tracker_growth_entries_total",
        description="Monthly growth entries appended",
        unit="1",
    )
    _snapshots_total = _meter.create_counter(
        "tracker_snapshots_total",
        description="Snapshot rows written",
        unit="1",
    )
    _errors_total = _meter.create_counter(
        "tracker_sheets_errors_total",
        description="Requests that failed, by error kind",
        unit="1",
    )

    _meter.create_observable_gauge(
        "portfolio_net_worth",
        callbacks=[_net_worth_callback],
        description="Current market value of all holdings",
        unit="currency",
    )
    _meter.create_observable_gauge(
        "portfolio_unrealized_gain_loss",
        callbacks=[_gain_loss_callback],
        description="Net worth minus amount invested",
        unit="currency",
    )
    _meter.create_observable_gauge(
        "portfolio_allocation_variance",
        callbacks=[_variance_callback],
        description="Actual minus target allocation per sector",
        unit="percent",
    )

    # === LOGS ===
    logs_endpoint = endpoint.replace("/v1/metrics", "/v1/logs")
    log_exporter = OTLPLogExporter(endpoint=logs_endpoint)
    logger_provider = LoggerProvider(resource=resource)
    logger_provider.add_log_record_processor(BatchLogRecordProcessor(log_exporter))
    set_logger_provider(logger_provider)

    _log_handler = LoggingHandler(
        level=logging.INFO,
        logger_provider=logger_provider,
    )

    _initialized = True
    return True


def get_log_handler() -> LoggingHandler | None:
    """Get the OTLP logging handler to attach to Python loggers."""
    return _log_handler


# --- Gauge callbacks ---

def _net_worth_callback(options):
    if _net_worth is not None:
        yield metrics.Observation(_net_worth)


def _gain_loss_callback(options):
    if _unrealized_gain_loss is not None:
        yield metrics.Observation(_unrealized_gain_loss)


def _variance_callback(options):
    for sector, variance in _allocation_variance.items():
        yield metrics.Observation(variance, {"sector": sector})


# --- Recording functions ---

def record_holding_change(operation: str) -> None:
    """Record a holding being created, updated or deleted."""
    if not _initialized:
        return

    _holdings_changes_total.add(1, {"operation": operation})


def record_growth_entry(account: str) -> None:
    """Record a monthly growth entry being appended."""
    if not _initialized:
        return

    _growth_entries_total.add(1, {"account": account})


def record_snapshot(rows: int) -> None:
    """Record a snapshot run and the number of rows it wrote."""
    if not _initialized:
        return

    _snapshots_total.add(rows)


def record_error(kind: str) -> None:
    """Record a failed request by its error label."""
    if not _initialized:
        return

    _errors_total.add(1, {"kind": kind})


def record_summary(
    net_worth: float, unrealized_gain_loss: float, allocation_variance: dict[str, float]
) -> None:
    """Store the latest summary figures for the observable gauges.

    Called whenever a summary is computed via the API.
    """
    global _net_worth, _unrealized_gain_loss, _allocation_variance

    if not _initialized:
        return

    _net_worth = net_worth
    _unrealized_gain_loss = unrealized_gain_loss
    _allocation_variance = dict(allocation_variance)
