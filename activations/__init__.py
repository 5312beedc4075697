"""
Activations module - Device binding.

This module handles:
- Binding a license to a single device
- Verifying a license for a device
"""
