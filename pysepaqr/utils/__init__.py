"""Utility modules for the pysepaqr application.

This package contains small helpers shared by the payload model and the
validators, such as byte counting and text formatting of field values.
"""
