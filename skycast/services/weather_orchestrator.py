from datetime import date, datetime
from typing import Callable, Optional, Union

import structlog

from skycast.config.config import Config, config as default_config
from skycast.exceptions.storage import StorageError
from skycast.exceptions.weather import AuthError, LocationError, TierError, TransportError
from skycast.models.outcome import ClassifiedOutcome, ErrorCategory, RecoverableError, Success, TerminalError
from skycast.models.request import RequestMode
from skycast.models.state import OrchestratorState
from skycast.models.weather.weather import WeatherReport
from skycast.services.credential_store import CredentialStore
from skycast.services.geolocation import GeolocationProvider, build_geolocation_provider
from skycast.services.query_normalizer import QueryNormalizer, query_normalizer
from skycast.services.recency_cache import RecencyCache
from skycast.services.refresh_scheduler import RefreshScheduler
from skycast.services.response_classifier import ResponseClassifier, response_classifier
from skycast.services.retry_coordinator import RetryCoordinator
from skycast.services.transport_selector import TransportSelector, resolve_mode
from skycast.services.weather_service import WeatherService
from skycast.storage.base import KeyValueStore
from skycast.storage.factory import build_store
from skycast.utils.utils import format_coordinates

logger = structlog.get_logger(__name__)


def _isoformat(value: Union[date, str]) -> str:
    return value.isoformat() if isinstance(value, date) else value


class WeatherOrchestrator:
    """
    Turns free-text location queries into validated weather reports.

    The pipeline is normalize -> select transport -> fetch -> classify. A
    tier-restricted response is resolved by one automatic LIVE retry; any
    other failure is terminal and surfaced through ``state.error``.

    Every invocation captures a generation number on entry. When a newer
    invocation has started by the time it settles, its result is returned to
    its own caller but never written to the shared state. A superseded tier
    rejection comes back as a terminal TIER error, since no retry follows it.
    """

    def __init__(
        self,
        store: KeyValueStore,
        scheduler,
        settings: Optional[Config] = None,
        weather_service: Optional[WeatherService] = None,
        normalizer: Optional[QueryNormalizer] = None,
        selector: Optional[TransportSelector] = None,
        classifier: Optional[ResponseClassifier] = None,
        geolocation: Optional[GeolocationProvider] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.settings = settings or default_config
        self.weather_service = weather_service or WeatherService(self.settings)
        self.normalizer = normalizer or query_normalizer
        self.selector = selector or TransportSelector(self.settings)
        self.classifier = classifier or response_classifier
        self.geolocation = geolocation or build_geolocation_provider(self.settings)
        self.notify = notify

        self.credentials = CredentialStore(store, self.settings.weatherstack_access_key)
        self.recent = RecencyCache(store, max_entries=self.settings.recent_searches_limit)
        self.retry = RetryCoordinator(scheduler, self.settings.retry_delay_seconds)
        self.refresh = RefreshScheduler(scheduler, self.settings.refresh_interval_seconds, self.fetch_weather)

        self.secure = self.settings.is_secure_context
        self.state = OrchestratorState(recent_searches=self.recent.entries)
        self._generation = 0

        logger.info(
            "Weather orchestrator initialized",
            hosting_scheme=self.settings.hosting_scheme,
            recent_searches=len(self.state.recent_searches),
        )

    async def fetch_weather(
        self, query: str, historical_date: Optional[Union[date, str]] = None
    ) -> ClassifiedOutcome:
        """
        Run the pipeline for a raw query.

        Args:
            query: Free-text location query
            historical_date: Request this date for this call only, regardless of
                the historical mode setting

        Returns:
            The classified outcome of this invocation

        Raises:
            InputError: If the query is empty after trimming
        """
        key = self.normalizer.normalize(query)
        self.retry.cancel_unless(key)
        if historical_date is not None:
            target_date = _isoformat(historical_date)
            mode = RequestMode.HISTORICAL
        else:
            target_date = self.state.historical_date
            mode = resolve_mode(self.state.use_historical, target_date)
        return await self._run(key, mode, is_retry=False, historical_date=target_date)

    async def use_current_location(self) -> ClassifiedOutcome:
        """Run the pipeline for the geolocation provider's coordinates."""
        try:
            latitude, longitude = await self.geolocation.resolve()
        except LocationError as e:
            logger.warning("Geolocation unavailable", error=str(e))
            outcome = TerminalError(reason=str(e), category=ErrorCategory.LOCATION)
            self._generation += 1
            self._fail(outcome)
            return outcome

        return await self.fetch_weather(format_coordinates(latitude, longitude))

    async def refresh_report(self) -> Optional[ClassifiedOutcome]:
        """Re-issue the pipeline for the location of the held report."""
        if self.state.report is None:
            return None
        return await self.fetch_weather(self.state.report.location_name)

    async def get_report(self, query: str) -> WeatherReport:
        """
        Run the pipeline and return the report, raising on failure.

        Raises:
            InputError: If the query is empty
            TierError: If a LIVE retry has been scheduled instead of a report
            WeatherServiceError: Subclass matching the terminal error category
        """
        outcome = await self.fetch_weather(query)
        if isinstance(outcome, Success):
            return outcome.report
        if isinstance(outcome, RecoverableError):
            raise TierError(outcome.reason)
        raise outcome.to_exception()

    async def _run(
        self, key: str, mode: RequestMode, is_retry: bool, historical_date: Optional[str] = None
    ) -> ClassifiedOutcome:
        self._generation += 1
        generation = self._generation
        self.state.loading = True
        self.state.error = None

        outcome = await self._dispatch(key, mode, historical_date)

        if generation != self._generation:
            logger.info(
                "Discarding stale result",
                query=key,
                generation=generation,
                current_generation=self._generation,
            )
            if isinstance(outcome, RecoverableError):
                # no retry is scheduled for a superseded call
                return TerminalError(reason=f"STATION_RESPONSE: {outcome.reason}", category=ErrorCategory.TIER)
            return outcome

        self.state.loading = False
        return self._apply(outcome, key, is_retry)

    async def _dispatch(self, key: str, mode: RequestMode, historical_date: Optional[str]) -> ClassifiedOutcome:
        try:
            request = self.selector.select(
                key,
                mode,
                self.credentials.get(),
                secure=self.secure,
                historical_date=historical_date,
            )
        except AuthError as e:
            return TerminalError(reason=str(e), category=ErrorCategory.AUTH)

        try:
            response = await self.weather_service.fetch(request)
        except TransportError as e:
            logger.warning("No response received", query=key, route=request.route.value, error=str(e))
            return self.classifier.unreachable(request.route)

        return self.classifier.classify(response, request)

    def _apply(self, outcome: ClassifiedOutcome, key: str, is_retry: bool) -> ClassifiedOutcome:
        if isinstance(outcome, RecoverableError) and is_retry:
            outcome = TerminalError(reason=f"STATION_RESPONSE: {outcome.reason}", category=ErrorCategory.TIER)

        if isinstance(outcome, Success):
            self._succeed(outcome.report)
        elif isinstance(outcome, RecoverableError):
            self._downgrade(key, outcome)
        else:
            self._fail(outcome)
        return outcome

    def _succeed(self, report: WeatherReport):
        self.state.report = report
        self.state.error = None
        self.state.notice = None
        self.state.last_updated = datetime.now()
        try:
            self.state.recent_searches = self.recent.add(report.location_name)
        except StorageError as e:
            logger.warning("Failed to persist recent searches", error=str(e))
            self.state.recent_searches = self.recent.entries
        self.refresh.sync(report.location_name)
        logger.info("Weather report resolved", location=report.location_name, mode=report.mode.value)

    def _downgrade(self, key: str, outcome: RecoverableError):
        self.state.report = None
        self.state.use_historical = False
        self.refresh.sync(None)
        notice = self.retry.schedule(key, self._retry)
        self.state.notice = notice
        logger.warning("Downgrading to live data", query=key, reason=outcome.reason, code=outcome.code)
        if self.notify:
            self.notify(notice)

    def _fail(self, outcome: TerminalError):
        self.state.report = None
        self.state.loading = False
        self.state.notice = None
        self.state.error = outcome.reason
        self.refresh.sync(None)
        logger.warning("Weather request failed", category=outcome.category.value, status=outcome.status)

    async def _retry(self, key: str, mode: RequestMode) -> ClassifiedOutcome:
        return await self._run(key, mode, is_retry=True)

    def set_credential(self, credential: str) -> str:
        """Persist a new access key and clear the current error."""
        saved = self.credentials.save(credential)
        self.state.error = None
        return saved

    def set_historical(self, enabled: bool, historical_date: Optional[Union[date, str]] = None):
        self.state.use_historical = enabled
        if historical_date is not None:
            self.state.historical_date = _isoformat(historical_date)

    def set_auto_refresh(self, enabled: bool):
        self.state.auto_refresh = enabled
        location = self.state.report.location_name if self.state.report else None
        if enabled:
            self.refresh.enable(location)
        else:
            self.refresh.disable()

    def get_state(self) -> OrchestratorState:
        """Return a snapshot of the current state."""
        return self.state.model_copy(
            update={
                "recent_searches": self.recent.entries,
                "retry_pending": self.retry.pending,
                "auto_refresh": self.refresh.enabled,
            },
            deep=True,
        )

    def shutdown(self):
        """Cancel the pending retry and the auto refresh timer."""
        self.retry.cancel()
        self.refresh.disable()
        logger.info("Weather orchestrator shut down")


def build_orchestrator(scheduler, settings: Optional[Config] = None, **kwargs) -> WeatherOrchestrator:
    """Create an orchestrator backed by the configured key/value store."""
    settings = settings or default_config
    return WeatherOrchestrator(store=build_store(settings), scheduler=scheduler, settings=settings, **kwargs)
