"""Core simulation logic: models, generators, signal classification, windowing.

This package contains pure logic with no I/O dependencies (no network,
no files). The app/ package schedules it and exposes it over HTTP.
"""
