"""Tests for the donor dashboard data controller."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from client.api import ApiError
from client.controller import DashboardConfig, DonorDashboardController
from client.state import (
    OUTCOME_FAILED,
    OUTCOME_FOUND,
    OUTCOME_NOT_FOUND,
    DashboardState,
    DonationRecord,
)
from helpers import FakeDonorApi, ManualExecutor


def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_mount_loads_every_resource(controller, executor):
    controller.mount()
    assert len(executor.pending) == 6

    executor.run_all()
    state = controller.snapshot()

    assert state.profile_status == "approved"
    assert state.profile_outcome == OUTCOME_FOUND
    assert state.donated_count == 3
    assert state.donor_info.blood_type == "O+"
    assert state.donor_info.days_until_eligible == 60
    assert state.donor_info.is_eligible is False
    assert state.recent_donations == (DonationRecord("2026-09-18", "City Blood Bank", 1),)
    assert state.loading_donations is False
    assert state.available_requests_count == 2
    assert state.unread_count == 4


def test_initial_state_is_loading(controller):
    state = controller.snapshot()

    assert state.profile_status == "loading"
    assert state.loading_donations is True
    assert state.donor_info.blood_type is None


def test_recent_donations_requested_with_limit(controller, executor, fake_api):
    controller.mount()
    executor.run_all()

    assert fake_api.calls_to("get_recent_donations") == [("get_recent_donations", 7, {"limit": 5})]


@pytest.mark.parametrize("profile_response, outcome", [
    ({"success": False, "message": "Donor profile not found"}, OUTCOME_NOT_FOUND),
    (ApiError("connection refused"), OUTCOME_FAILED),
])
def test_missing_and_failed_profile_both_show_none(executor, profile_response, outcome):
    api = FakeDonorApi(get_donor_profile=profile_response)
    ctrl = DonorDashboardController(DashboardConfig(user_id=1, enable_polling=False), api=api, executor=executor)

    ctrl.mount()
    executor.run_all()
    state = ctrl.snapshot()

    assert state.profile_status == "none"
    assert state.profile_outcome == outcome
    ctrl.unmount()


def test_profile_status_lowercased_with_camel_case_fields(executor):
    api = FakeDonorApi(get_donor_profile={
        "success": True,
        "profile": {"approvalStatus": "REJECTED", "adminRemarks": "Photo unclear"},
    })
    ctrl = DonorDashboardController(DashboardConfig(user_id=1, enable_polling=False), api=api, executor=executor)

    ctrl.mount()
    executor.run_all()

    assert ctrl.snapshot().profile_status == "rejected"
    assert ctrl.snapshot().profile_remarks == "Photo unclear"
    ctrl.unmount()


def test_unknown_profile_status_is_kept(executor):
    api = FakeDonorApi(get_donor_profile={"success": True, "profile": {"approval_status": "Suspended"}})
    ctrl = DonorDashboardController(DashboardConfig(user_id=1, enable_polling=False), api=api, executor=executor)

    ctrl.mount()
    executor.run_all()

    assert ctrl.snapshot().profile_status == "suspended"
    ctrl.unmount()


def test_stats_and_details_failures_keep_previous_values(controller, executor, fake_api):
    controller.mount()
    executor.run_all()
    before = controller.snapshot()

    fake_api.responses["get_donor_stats"] = ApiError("timeout")
    fake_api.responses["get_donor_details"] = {"success": False}
    controller.poll_once()
    executor.run_all()
    after = controller.snapshot()

    assert after.donated_count == before.donated_count
    assert after.donor_info == before.donor_info


def test_counter_failures_reset_to_zero(controller, executor, fake_api):
    controller.mount()
    executor.run_all()

    fake_api.responses["get_available_for_donor"] = ApiError("HTTP 500", status_code=500)
    fake_api.responses["get_unread_notification_count"] = ApiError("HTTP 500", status_code=500)
    controller.focus()
    executor.run_all()

    assert controller.snapshot().available_requests_count == 0
    assert controller.snapshot().unread_count == 0


def test_recent_donation_failure_clears_loading_flag(executor):
    api = FakeDonorApi(get_recent_donations=ApiError("down"))
    ctrl = DonorDashboardController(DashboardConfig(user_id=1, enable_polling=False), api=api, executor=executor)

    ctrl.mount()
    executor.run_all()

    assert ctrl.snapshot().loading_donations is False
    assert ctrl.snapshot().recent_donations == ()
    ctrl.unmount()


def test_malformed_response_is_treated_as_failure(controller, executor, fake_api):
    fake_api.responses["get_donor_stats"] = {"success": True, "donatedCount": "many"}
    controller.mount()
    executor.run_all()

    assert controller.snapshot().donated_count == 0


def test_poll_tick_skips_resources_in_flight(controller, executor):
    controller.mount()
    controller.poll_once()

    assert len(executor.pending) == 6


def test_poll_tick_refreshes_fast_subset(controller, executor, fake_api):
    controller.mount()
    executor.run_all()
    fake_api.calls.clear()

    controller.poll_once()
    executor.run_all()

    assert sorted(call[0] for call in fake_api.calls) == [
        "get_available_for_donor",
        "get_donor_details",
        "get_donor_stats",
    ]


class TickingExecutor(ManualExecutor):
    """Runs ``on_done`` after a task finishes but before the controller sees it."""

    def __init__(self):
        super().__init__()
        self.on_done = None

    def submit(self, fn, *args, **kwargs):
        future = super().submit(fn, *args, **kwargs)
        future.add_done_callback(lambda f: self.on_done and self.on_done())
        return future


def test_poll_tick_between_completion_and_apply_keeps_result(fake_api):
    executor = TickingExecutor()
    ctrl = DonorDashboardController(
        DashboardConfig(user_id=7, enable_polling=False), api=fake_api, executor=executor
    )
    ctrl.mount()
    executor.run_all()

    fake_api.responses["get_donor_stats"] = {"success": True, "donatedCount": 10}
    ctrl.load_donor_stats()
    ticks = []

    def tick_once():
        if not ticks:
            ticks.append(1)
            ctrl.poll_once()

    executor.on_done = tick_once
    executor.run(0)

    assert ticks == [1]
    assert ctrl.snapshot().donated_count == 10
    # The tick left stats alone and only queued the other polled resources
    assert len(executor.pending) == 2
    ctrl.unmount()


def test_forced_refresh_drops_superseded_response(controller, executor, fake_api):
    controller.mount()
    executor.run_all()

    values = iter([10, 5])
    fake_api.responses["get_donor_stats"] = lambda uid: {"success": True, "donatedCount": next(values)}
    controller.load_donor_stats(force=True)
    controller.load_donor_stats(force=True)
    assert len(executor.pending) == 2

    executor.run(1)  # newer request answers first
    executor.run(0)  # older request answers last and must be ignored

    assert controller.snapshot().donated_count == 10


def test_unmount_with_queued_requests_applies_nothing(controller, executor, fake_api):
    controller.mount()
    controller.unmount()
    executor.run_all()

    assert fake_api.calls == []
    assert controller.snapshot() == DashboardState()


def test_unmount_while_poll_in_flight_applies_nothing(fake_api):
    gate = threading.Event()
    started = threading.Event()

    def slow_stats(uid):
        started.set()
        gate.wait(timeout=2.0)
        return {"success": True, "donatedCount": 99}

    fake_api.responses["get_donor_stats"] = slow_stats
    pool = ThreadPoolExecutor(max_workers=2)
    ctrl = DonorDashboardController(DashboardConfig(user_id=7, enable_polling=False), api=fake_api, executor=pool)

    ctrl.mount()
    assert _wait_for(started.is_set)
    ctrl.unmount()
    gate.set()
    pool.shutdown(wait=True)

    assert started.is_set()
    assert ctrl.snapshot() == DashboardState()
    assert ctrl.snapshot().donated_count == 0


def test_no_user_means_no_requests(fake_api, executor):
    ctrl = DonorDashboardController(DashboardConfig(enable_polling=False), api=fake_api, executor=executor)

    ctrl.mount()

    assert executor.pending == []
    assert ctrl.snapshot().profile_status == "loading"
    ctrl.unmount()


def test_set_user_drops_results_for_previous_user(controller, executor, fake_api):
    controller.mount()
    controller.set_user(8)
    executor.run_all()

    assert {call[1] for call in fake_api.calls} == {8}
    assert controller.snapshot().profile_status == "approved"


def test_snapshot_is_not_mutated_by_later_results(controller, executor):
    controller.mount()
    before = controller.snapshot()

    executor.run_all()

    assert before.profile_status == "loading"
    assert controller.snapshot() is not before


def test_background_polling_runs_until_unmount(fake_api):
    pool = ThreadPoolExecutor(max_workers=2)
    config = DashboardConfig(user_id=7, poll_interval_sec=0.02)
    ctrl = DonorDashboardController(config, api=fake_api, executor=pool)

    ctrl.mount()
    assert _wait_for(lambda: len(fake_api.calls_to("get_donor_details")) >= 3)
    ctrl.unmount()
    pool.shutdown(wait=True)

    settled = len(fake_api.calls_to("get_donor_details"))
    time.sleep(0.1)
    assert len(fake_api.calls_to("get_donor_details")) == settled
    assert ctrl._timer_thread is None


def test_close_releases_api(fake_api):
    ctrl = DonorDashboardController(DashboardConfig(user_id=7, enable_polling=False), api=fake_api,
                                    executor=ManualExecutor())
    with ctrl:
        assert ctrl.mounted

    assert not ctrl.mounted
    assert fake_api.closed
