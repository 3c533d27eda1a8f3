"""
Unit tests for multiset hash components

Tests individual modules in isolation:
- test_ristretto.py: ristretto255 encoding, decoding and arithmetic
- test_digests.py: wide digest factories and adapters
- test_hasher.py: MultisetHash operations and protocol guards
- test_config.py: settings and logging setup
"""
