"""Test helper utilities."""

from concurrent.futures import Executor, Future


class ManualExecutor(Executor):
    """Executor that runs submitted work only when a test says so."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run(self, index=0):
        """Run the ``index``-th queued task and return its future."""
        future, fn, args, kwargs = self.pending.pop(index)
        if not future.set_running_or_notify_cancel():
            return future
        try:
            result = fn(*args, **kwargs)
        except BaseException as e:
            future.set_exception(e)
        else:
            future.set_result(result)
        return future

    def run_all(self):
        while self.pending:
            self.run()

    def shutdown(self, wait=True, *, cancel_futures=False):
        if cancel_futures:
            for future, *_ in self.pending:
                future.cancel()
            self.pending.clear()


class FakeDonorApi:
    """Stand-in for DonorApiClient returning canned responses.

    Each response may be a value, an exception instance (raised) or a
    callable taking the user id.
    """

    def __init__(self, **responses):
        self.responses = {
            "get_donor_profile": {"success": True, "profile": {"approval_status": "approved"}},
            "get_donor_stats": {"success": True, "donatedCount": 3, "totalUnits": 3},
            "get_donor_details": {
                "success": True,
                "bloodGroup": "O+",
                "lastDonation": "2026-09-18",
                "nextEligible": "2026-12-17",
                "daysUntilEligible": 60,
                "isEligible": False,
            },
            "get_recent_donations": {
                "success": True,
                "donations": [{"date": "2026-09-18", "location": "City Blood Bank", "units": 1}],
            },
            "get_available_for_donor": {"success": True, "requests": [{"id": 1}, {"id": 2}]},
            "get_unread_notification_count": 4,
        }
        self.responses.update(responses)
        self.calls = []
        self.closed = False

    def _respond(self, name, user_id, **kwargs):
        self.calls.append((name, user_id, kwargs))
        response = self.responses[name]
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response(user_id)
        return response

    def calls_to(self, name):
        return [call for call in self.calls if call[0] == name]

    def get_donor_profile(self, user_id):
        return self._respond("get_donor_profile", user_id)

    def get_donor_stats(self, user_id):
        return self._respond("get_donor_stats", user_id)

    def get_donor_details(self, user_id):
        return self._respond("get_donor_details", user_id)

    def get_recent_donations(self, user_id, limit=5):
        return self._respond("get_recent_donations", user_id, limit=limit)

    def get_available_for_donor(self, user_id):
        return self._respond("get_available_for_donor", user_id)

    def get_unread_notification_count(self, user_id):
        return self._respond("get_unread_notification_count", user_id)

    def close(self):
        self.closed = True
