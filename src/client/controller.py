"""Donor dashboard data controller.

Keeps the remote-sourced state of the donor home screen current:

- profile approval status (and admin remarks)
- donation statistics (donated count)
- donor details (blood type, eligibility)
- recent donations
- available blood request count
- unread notification count

Refresh triggers are ``mount()``, ``focus()`` and a background polling timer
that calls ``poll_once()`` for the fast-changing subset (available count,
stats, details). Every resource refresh is single-flight: timer ticks skip a
resource that still has a request outstanding, while mount and focus force a
new request that supersedes it. Results are applied only when their token is
still current and the controller is mounted, so nothing lands after
``unmount()``.
"""

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional

from client.api import DonorApiClient
from client.refresh import RefreshSlot
from client.state import (
    OUTCOME_FAILED,
    OUTCOME_FOUND,
    OUTCOME_NOT_FOUND,
    STATUS_NONE,
    DashboardState,
    DonationRecord,
    DonorInfo,
)
from config.config import (
    API_BASE_URL,
    FETCH_WORKERS,
    POLL_INTERVAL_SEC,
    RECENT_DONATIONS_LIMIT,
    REQUEST_TIMEOUT_SEC,
)
from utils.io import maybe_load_yaml
from utils.logging import get_logger

logger = get_logger(__name__)

PROFILE = "profile"
STATS = "stats"
DETAILS = "details"
DONATIONS = "recent_donations"
AVAILABLE = "available_requests"
UNREAD = "unread_count"
RESOURCES = (PROFILE, STATS, DETAILS, DONATIONS, AVAILABLE, UNREAD)
POLLED_RESOURCES = (AVAILABLE, STATS, DETAILS)


@dataclass
class DashboardConfig:
    """Dashboard configuration with YAML override support."""
    api_base_url: str = API_BASE_URL
    user_id: Optional[int] = None
    poll_interval_sec: float = POLL_INTERVAL_SEC
    recent_donations_limit: int = RECENT_DONATIONS_LIMIT
    request_timeout_sec: float = REQUEST_TIMEOUT_SEC
    fetch_workers: int = FETCH_WORKERS
    enable_polling: bool = True

    @classmethod
    def from_yaml(cls, yaml_path: Optional[str] = None) -> "DashboardConfig":
        """Create config with optional YAML overrides from a ``dashboard:`` section."""
        yaml_config = maybe_load_yaml(yaml_path)
        section = yaml_config.get("dashboard", {}) or {}
        if not isinstance(section, dict):
            section = {}

        defaults = cls()

        def override(key: str, cast: Callable[[Any], Any]) -> Any:
            default = getattr(defaults, key)
            value = section.get(key, default)
            if value is None or value == default:
                return default
            try:
                return cast(value)
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid dashboard.{key}={value!r}, using {default!r}")
                return default

        return cls(
            api_base_url=override("api_base_url", str),
            user_id=override("user_id", int),
            poll_interval_sec=override("poll_interval_sec", float),
            recent_donations_limit=override("recent_donations_limit", int),
            request_timeout_sec=override("request_timeout_sec", float),
            fetch_workers=override("fetch_workers", int),
            enable_polling=override("enable_polling", bool),
        )


class DonorDashboardController:
    """Owns the donor home screen state and its refresh lifecycle."""

    def __init__(
        self,
        config: Optional[DashboardConfig] = None,
        api: Optional[DonorApiClient] = None,
        executor: Optional[Executor] = None,
    ):
        self.config = config or DashboardConfig()
        self.api = api or DonorApiClient(
            base_url=self.config.api_base_url,
            timeout=self.config.request_timeout_sec,
        )
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.config.fetch_workers,
            thread_name_prefix="dashboard-fetch",
        )

        self._lock = threading.RLock()
        self._state = DashboardState()
        self._user_id = self.config.user_id
        self._mounted = False
        self._slots: Dict[str, RefreshSlot] = {name: RefreshSlot(name) for name in RESOURCES}

        # Background polling timer
        self._timer_thread: Optional[threading.Thread] = None
        self._timer_stop = threading.Event()

    # ----- lifecycle -----

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def user_id(self) -> Optional[int]:
        return self._user_id

    def snapshot(self) -> DashboardState:
        """Return the current immutable state for rendering."""
        with self._lock:
            return self._state

    def mount(self) -> None:
        """Initial load of every resource, then start polling."""
        with self._lock:
            if self._mounted:
                return
            self._mounted = True
            self._state = DashboardState()
        logger.info(f"Dashboard mounted for user {self._user_id}")
        self.refresh_all()
        self._start_timer()

    def focus(self) -> None:
        """Screen regained focus: reload everything."""
        self.refresh_all()

    def unmount(self) -> None:
        """Stop polling and drop every outstanding and future result."""
        with self._lock:
            if not self._mounted:
                return
            self._mounted = False
            for slot in self._slots.values():
                slot.invalidate()
            self._state = DashboardState()
        self._stop_timer()
        logger.info("Dashboard unmounted")

    def set_user(self, user_id: Optional[int]) -> None:
        """Switch the signed-in donor; outstanding results for the old one are dropped."""
        with self._lock:
            if user_id == self._user_id:
                return
            self._user_id = user_id
            for slot in self._slots.values():
                slot.invalidate()
            self._state = DashboardState()
            mounted = self._mounted
        if mounted:
            self.refresh_all()

    def close(self) -> None:
        """Unmount and release the executor and HTTP session."""
        self.unmount()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
        self.api.close()

    def __enter__(self) -> "DonorDashboardController":
        self.mount()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ----- triggers -----

    def refresh_all(self) -> None:
        self.load_profile_status(force=True)
        self.load_donor_stats(force=True)
        self.load_donor_details(force=True)
        self.load_recent_donations(force=True)
        self.update_available_count(force=True)
        self.load_unread_count(force=True)

    def poll_once(self) -> None:
        """One polling tick for the fast-changing resources."""
        self.update_available_count()
        self.load_donor_stats()
        self.load_donor_details()

    # ----- per-resource refreshes -----

    def load_profile_status(self, force: bool = False) -> Optional[Future]:
        return self._refresh(
            PROFILE,
            lambda uid: self.api.get_donor_profile(uid),
            self._apply_profile,
            self._profile_failed,
            force,
        )

    def load_donor_stats(self, force: bool = False) -> Optional[Future]:
        return self._refresh(
            STATS,
            lambda uid: self.api.get_donor_stats(uid),
            self._apply_stats,
            None,
            force,
        )

    def load_donor_details(self, force: bool = False) -> Optional[Future]:
        return self._refresh(
            DETAILS,
            lambda uid: self.api.get_donor_details(uid),
            self._apply_details,
            None,
            force,
        )

    def load_recent_donations(self, force: bool = False) -> Optional[Future]:
        limit = self.config.recent_donations_limit
        return self._refresh(
            DONATIONS,
            lambda uid: self.api.get_recent_donations(uid, limit=limit),
            self._apply_donations,
            self._donations_failed,
            force,
            on_start=lambda state: replace(state, loading_donations=True),
        )

    def update_available_count(self, force: bool = False) -> Optional[Future]:
        return self._refresh(
            AVAILABLE,
            lambda uid: self.api.get_available_for_donor(uid),
            self._apply_available,
            lambda state: replace(state, available_requests_count=0),
            force,
        )

    def load_unread_count(self, force: bool = False) -> Optional[Future]:
        return self._refresh(
            UNREAD,
            lambda uid: self.api.get_unread_notification_count(uid),
            lambda state, count: replace(state, unread_count=int(count)),
            lambda state: replace(state, unread_count=0),
            force,
        )

    # ----- result application (called with the lock held) -----

    @staticmethod
    def _apply_profile(state: DashboardState, data: Dict[str, Any]) -> DashboardState:
        profile = data.get("profile") if data.get("success") else None
        status = None
        if profile:
            status = profile.get("approval_status") or profile.get("approvalStatus")
        if not status:
            return replace(state, profile_status=STATUS_NONE, profile_remarks="",
                           profile_outcome=OUTCOME_NOT_FOUND)

        remarks = profile.get("admin_remarks") or profile.get("adminRemarks") or ""
        return replace(state, profile_status=str(status).lower(), profile_remarks=remarks,
                       profile_outcome=OUTCOME_FOUND)

    @staticmethod
    def _profile_failed(state: DashboardState) -> DashboardState:
        return replace(state, profile_status=STATUS_NONE, profile_remarks="",
                       profile_outcome=OUTCOME_FAILED)

    @staticmethod
    def _apply_stats(state: DashboardState, data: Dict[str, Any]) -> DashboardState:
        if data.get("success") is False or "donatedCount" not in data:
            return state
        return replace(state, donated_count=int(data["donatedCount"]))

    @staticmethod
    def _apply_details(state: DashboardState, data: Dict[str, Any]) -> DashboardState:
        if not data.get("success"):
            return state
        return replace(state, donor_info=DonorInfo.from_response(data))

    @staticmethod
    def _apply_donations(state: DashboardState, data: Dict[str, Any]) -> DashboardState:
        if not data.get("success"):
            return replace(state, loading_donations=False)
        donations = tuple(DonationRecord.from_dict(d) for d in data.get("donations") or [])
        return replace(state, recent_donations=donations, loading_donations=False)

    @staticmethod
    def _donations_failed(state: DashboardState) -> DashboardState:
        return replace(state, loading_donations=False)

    @staticmethod
    def _apply_available(state: DashboardState, data: Dict[str, Any]) -> DashboardState:
        return replace(state, available_requests_count=len(data.get("requests") or []))

    # ----- machinery -----

    def _refresh(
        self,
        name: str,
        fetch: Callable[[int], Any],
        on_result: Callable[[DashboardState, Any], DashboardState],
        on_error: Optional[Callable[[DashboardState], DashboardState]],
        force: bool,
        on_start: Optional[Callable[[DashboardState], DashboardState]] = None,
    ) -> Optional[Future]:
        with self._lock:
            user_id = self._user_id
            if not self._mounted or user_id is None:
                return None
            slot = self._slots[name]
            token = slot.begin(force)
            if token is None:
                logger.debug(f"Skipping {name} refresh, request already in flight")
                return None
            if on_start is not None:
                self._state = on_start(self._state)
            future = self._executor.submit(fetch, user_id)
            slot.attach(token, future)

        future.add_done_callback(
            lambda f: self._complete(name, token, f, on_result, on_error)
        )
        return future

    def _complete(
        self,
        name: str,
        token: int,
        future: Future,
        on_result: Callable[[DashboardState, Any], DashboardState],
        on_error: Optional[Callable[[DashboardState], DashboardState]],
    ) -> None:
        if future.cancelled():
            return
        error = future.exception()

        with self._lock:
            slot = self._slots[name]
            if not self._mounted or not slot.is_current(token):
                logger.debug(f"Dropping stale {name} result (token {token})")
                return
            slot.finish(token)

            if error is not None:
                logger.error(f"Error loading {name}: {error}")
                if on_error is not None:
                    self._state = on_error(self._state)
                return

            try:
                self._state = on_result(self._state, future.result())
            except (TypeError, ValueError, AttributeError) as e:
                logger.error(f"Malformed {name} response: {e}")
                if on_error is not None:
                    self._state = on_error(self._state)

    def _start_timer(self) -> None:
        """Start background timer for periodic polling."""
        if not self.config.enable_polling:
            logger.info("Dashboard polling disabled by configuration")
            return
        if self._timer_thread is not None and self._timer_thread.is_alive():
            return

        self._timer_stop.clear()
        self._timer_thread = threading.Thread(
            target=self._timer_loop, name="dashboard-poll", daemon=True
        )
        self._timer_thread.start()
        logger.info(f"Started dashboard polling (interval: {self.config.poll_interval_sec}s)")

    def _stop_timer(self) -> None:
        """Stop background timer."""
        self._timer_stop.set()
        thread = self._timer_thread
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=2.0)
        self._timer_thread = None

    def _timer_loop(self) -> None:
        """Background loop calling ``poll_once`` until stopped."""
        while not self._timer_stop.wait(self.config.poll_interval_sec):
            try:
                self.poll_once()
            except Exception as e:
                logger.error(f"Error in dashboard polling: {e}")
