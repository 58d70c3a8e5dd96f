"""
Integration tests for the resilient client.

Test components together with a real clock:
- Read-after-write and mutate-then-verify against an in-process
  eventually-consistent repository (httpx.MockTransport)
- Live service at BASE_URL (skipped when not reachable)
"""
