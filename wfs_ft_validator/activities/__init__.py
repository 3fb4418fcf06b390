"""Validation activities.

Each module implements one step of a validation run and is called by
``orchestrators.validation_run`` in sequence:

- read_capabilities: feature type names from GetCapabilities
- build_schema: combined, envelope-patched schema from DescribeFeatureType
- check_hrefs: reachability of in-service hrefs in a feature response
- validate_features: schema validation of a feature response
"""
