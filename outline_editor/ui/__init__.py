"""Headless presentation layer: block surfaces and the editor controller."""
