"""
Tests package for the multiset hash

- Unit tests: group arithmetic, digests, hasher state machine, configuration
- Integration tests: replica comparison and sharded accumulation workflows
"""
