"""
EdgeMapper Models

- dmi: inbound device/device-model wire descriptors
- schemas: protocol-agnostic internal representation
"""
