"""Run orchestration.

- validation_run: capabilities -> schema -> per feature type checks
"""
