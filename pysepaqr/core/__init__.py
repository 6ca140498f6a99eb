"""Core components for the pysepaqr application.

This package contains the payment payload model, the base class for all
field validators, the configuration manager, and the report-producing
validation pipeline.
"""
