# peerkeys Test Suite
"""
Test suite including:
- Unit tests per module
- Known-answer vectors (RFC 8032, RFC 4231, RFC 6070, RFC 6979)
- Integration tests (handshake style key agreement, key lifecycle)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
