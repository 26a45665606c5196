"""Application services: loading inputs, matching runs and reference data."""
