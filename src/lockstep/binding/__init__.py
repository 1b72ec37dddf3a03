"""Attach signature checks to record types at their declaration."""

from lockstep.binding.validate import generated_test_name, validate

__all__ = ["generated_test_name", "validate"]
