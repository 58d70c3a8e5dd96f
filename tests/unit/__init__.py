"""
Unit tests for the resilient client.

Test individual components in isolation:
- Poll schedules (backoff growth, validation, immutability)
- Condition evaluator (fake clock, deadline boundary, error classification)
- Retry driver and mutate-then-verify protocol
- Predicates and JSON verifiers
- HTTP client, logging hook and request executor (httpx.MockTransport)
"""
