from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
import pytest

from smolchat.core.retry import RetryPolicy, RetryState


class TestRetryPolicy:
    def test_defaults(self):
        policy = RetryPolicy()
        assert policy.limit == 5
        assert policy.base_delay == 0.2
        assert policy.jitter == 0.1

    @pytest.mark.parametrize("field", ["limit", "base_delay", "jitter"])
    def test_rejects_negative(self, field):
        with pytest.raises(PydanticValidationError):
            RetryPolicy(**{field: -1})


class TestRetryState:
    def test_initial_state(self):
        state = RetryState(RetryPolicy(limit=3))
        assert state.attempts == 0
        assert state.attempt_number == 1
        assert not state.exhausted

    def test_record_failure(self):
        state = RetryState(RetryPolicy(limit=2))
        state.record_failure()
        assert state.attempts == 1
        assert not state.exhausted

        state.record_failure()
        assert state.attempts == 2
        assert state.exhausted

    def test_zero_limit_is_exhausted(self):
        assert RetryState(RetryPolicy(limit=0)).exhausted

    @pytest.mark.parametrize("attempts", [0, 1, 2, 5])
    def test_delay_bounds(self, attempts):
        state = RetryState(RetryPolicy(limit=10, base_delay=0.5, jitter=0.25))
        for _ in range(attempts):
            state.record_failure()

        for _ in range(200):
            delay = state.next_delay()
            assert delay >= 0
            assert delay >= attempts * 0.5
            assert delay < attempts * 0.5 + 0.25

    def test_delay_without_jitter(self):
        state = RetryState(RetryPolicy(base_delay=0.2, jitter=0))
        assert state.next_delay() == 0
        state.record_failure()
        state.record_failure()
        assert state.next_delay() == pytest.approx(0.4)
