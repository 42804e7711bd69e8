"""
Custodian Integration Tests

Tests covering:
- Full session runs against packs and destinations on disk
- Conditional step idempotence across repeated runs
- The nodest guard and missing manifests
- The command line entry point
"""
