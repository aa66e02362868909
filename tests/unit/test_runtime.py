import unittest

from readyprobe.config import ProbeConfig
from readyprobe.errors import ProbeTimeoutError
from readyprobe.http import HttpResponse
from readyprobe.http.adapters import StubHttpClient
from readyprobe.models.probe import ProbeOutcome
from readyprobe.runtime import ReadinessProber


class ManualClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


class TestReadinessProber(unittest.TestCase):
    def test_await_ready_reuses_injected_client_and_closes(self):
        client = StubHttpClient({"http://localhost:3000/": HttpResponse(ok=True, status_code=200, text="Open WebUI")})
        clock = ManualClock()

        with ReadinessProber(http_client=client, clock=clock, sleep=clock.sleep) as prober:
            config = ProbeConfig(candidates=["http://localhost:3000/"], total_timeout=5, expected_signature="open webui")
            first = prober.await_ready(config)
            second = prober.await_ready(config)
            self.assertFalse(client.closed)

        self.assertEqual(first.outcome, ProbeOutcome.REACHABLE_VERIFIED)
        self.assertEqual(second.rounds, 1)
        self.assertEqual(len(client.requests), 2)
        self.assertTrue(client.closed)

    def test_await_ready_timeout(self):
        clock = ManualClock()
        prober = ReadinessProber(http_client=StubHttpClient(), clock=clock, sleep=clock.sleep)

        with self.assertRaises(ProbeTimeoutError) as ctx:
            prober.await_ready(ProbeConfig(candidates=["http://localhost:3000/"], total_timeout=3, poll_interval=1))

        self.assertEqual(ctx.exception.rounds, 3)
        self.assertEqual(clock.now, 3.0)
        prober.close()

    def test_check_probes_once(self):
        client = StubHttpClient({"http://localhost:11434/api/tags": HttpResponse(ok=True, status_code=200, text='{"models": []}')})
        with ReadinessProber(http_client=client) as prober:
            attempt = prober.check("http://localhost:11434/api/tags", timeout=1.0)

        self.assertEqual(attempt.outcome, ProbeOutcome.REACHABLE_UNVERIFIED)
        self.assertEqual(attempt.body_snippet, '{"models": []}')
        self.assertEqual(client.requests[0].timeout, 1.0)


if __name__ == "__main__":
    unittest.main()
