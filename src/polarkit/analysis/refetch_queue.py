"""BandRefetchQueue: refetches band telemetry whenever the band set changes.

Each request carries an immutable snapshot of the band set taken when it was
queued, so a late-running fetch classifies against a consistent (possibly
outdated) set of bands. Only the most recent request is kept: older pending
requests are dropped when a new one arrives.
"""

import contextlib
import logging
import queue
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from polarkit.analysis.band_classifier import BandClassifier
from polarkit.analysis.band_partitioner import range_for
from polarkit.analysis.telemetry import TelemetryProvider
from polarkit.analysis.telemetry_summary import TelemetrySummary, summarize_telemetry
from polarkit.core.config import DEFAULT_CONFIG, EngineConfig
from polarkit.core.models import BandRange, PolarModel, TelemetryPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefetchRequest:
    wind_speeds: Tuple[float, ...]
    target_band: float
    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass
class BandTelemetry:
    """Telemetry scoped to one band."""

    request: RefetchRequest
    band_range: BandRange
    points: List[TelemetryPoint]
    summary: TelemetrySummary

    @property
    def band(self) -> float:
        return self.request.target_band


class BandRefetchQueue:
    """Queue of band telemetry refetches.

    Parameters
    ----------
    provider:
        Telemetry source queried with the target band's TWS range.
    config:
        Engine configuration (band tolerance, histogram bins).
    on_result:
        Called with each :class:`BandTelemetry` produced by the background
        worker started with :meth:`start`.
    """

    def __init__(
        self,
        provider: TelemetryProvider,
        config: Optional[EngineConfig] = None,
        on_result: Optional[Callable[[BandTelemetry], None]] = None,
    ) -> None:
        self.provider = provider
        self.config = config or DEFAULT_CONFIG
        self.classifier = BandClassifier(self.config)
        self._on_result = on_result
        self._queue: "queue.Queue[RefetchRequest]" = queue.Queue(maxsize=1)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def request(
        self,
        model: PolarModel,
        target_band: float,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> RefetchRequest:
        """Snapshot the band set of ``model`` and queue a refetch for ``target_band``."""
        req = RefetchRequest(
            wind_speeds=model.wind_speeds(),
            target_band=target_band,
            start=start,
            end=end,
        )
        self._enqueue(req)
        return req

    def pending(self) -> int:
        return self._queue.qsize()

    def process_pending(self) -> Optional[BandTelemetry]:
        """Run the queued request, if any, on the calling thread."""
        try:
            req = self._queue.get_nowait()
        except queue.Empty:
            return None
        return self.process(req)

    def process(self, req: RefetchRequest) -> BandTelemetry:
        """Fetch the target band's range and keep the samples that belong to it."""
        band_range = range_for(req.wind_speeds, req.target_band)
        fetched = self.provider.fetch(
            min_tws=band_range.min_tws,
            max_tws=band_range.max_tws,
            start=req.start,
            end=req.end,
        )
        # Ranges give a midpoint to the upper band; descending order makes
        # nearest-band ties resolve the same way.
        points = self.classifier.filter_for_band(
            fetched, sorted(req.wind_speeds, reverse=True), req.target_band
        )
        logger.debug(
            "Band %s: %d of %d samples kept", req.target_band, len(points), len(fetched)
        )
        return BandTelemetry(
            request=req,
            band_range=band_range,
            points=points,
            summary=summarize_telemetry(points, self.config.histogram_bins),
        )

    def start(self) -> None:
        """Start the background worker thread."""
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name="BandRefetch")
        self._thread.start()

    def stop(self) -> None:
        """Signal the worker to stop and join it."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                req = self._queue.get(timeout=0.1)
            except queue.Empty:
                continue
            try:
                result = self.process(req)
            except Exception as exc:
                logger.warning("Refetch for band %s failed: %s", req.target_band, exc)
                continue
            if self._on_result is not None:
                self._on_result(result)

    def _enqueue(self, req: RefetchRequest) -> None:
        """Put ``req`` in the queue, replacing any request still pending."""
        try:
            self._queue.put_nowait(req)
        except queue.Full:
            with contextlib.suppress(queue.Empty):
                self._queue.get_nowait()
            with contextlib.suppress(queue.Full):
                self._queue.put_nowait(req)
