import unittest
from datetime import date, datetime

from apodbg.utils import ExponentialBackoff, FrozenClock, task_wrapper


class TestExponentialBackoff(unittest.TestCase):
    def test_first_attempt_is_immediate(self):
        self.assertEqual(next(ExponentialBackoff(attempts=3)), 0)

    def test_stops_after_attempts(self):
        delays = list(ExponentialBackoff(attempts=4, variance=0))
        self.assertEqual(delays, [0, 1, 2, 4])

    def test_maximum(self):
        delays = list(ExponentialBackoff(attempts=6, variance=0, maximum=5))
        self.assertEqual(delays[-1], 5)

    def test_remaining(self):
        backoff = ExponentialBackoff(attempts=2)
        next(backoff)
        self.assertEqual(backoff.remaining, 1)

    def test_invalid(self):
        with self.assertRaises(ValueError):
            ExponentialBackoff(attempts=0)
        with self.assertRaises(ValueError):
            ExponentialBackoff(attempts=1, base=1)


class TestFrozenClock(unittest.TestCase):
    def test_today(self):
        clock = FrozenClock(datetime(2026, 10, 19, 23, 59))
        self.assertEqual(clock.today(), date(2026, 10, 19))
        clock.set(datetime(2026, 10, 20, 0, 1))
        self.assertEqual(clock.today(), date(2026, 10, 20))


class TestTaskWrapper(unittest.IsolatedAsyncioTestCase):
    async def test_exception_is_logged(self):
        @task_wrapper
        async def failing():
            raise RuntimeError("boom")

        with self.assertLogs("APODBackground", level="ERROR") as logs:
            self.assertIsNone(await failing())
        self.assertIn("Exception in failing task", logs.output[0])

    async def test_reraise(self):
        @task_wrapper(reraise=True)
        async def failing():
            raise RuntimeError("boom")

        with self.assertLogs("APODBackground", level="ERROR"), self.assertRaises(RuntimeError):
            await failing()

    async def test_result_passes_through(self):
        @task_wrapper
        async def working():
            return 42

        self.assertEqual(await working(), 42)


if __name__ == "__main__":
    unittest.main()
