"""WFS feature type validator.

Checks an OGC Web Feature Service end to end: discovers the advertised
feature types, validates a sample of each against the service's own
combined schema, and probes the service-internal links found in the data.
"""

__version__ = "0.1.0"
