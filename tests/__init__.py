"""Test suite for the T2P gateway.

This package contains tests for:
- Validation primitives (predicates, ValidationResult, rule helpers)
- Plan-search and purchase-confirmation validators
- Upstream payload builders and the Tune2Protect client
- Configuration loading
- Integration through the gateway runtime and the HTTP application
"""
