"""
HostSense Test Suite

- unit/: Tests for the tool registry, validation and dispatcher in isolation
- integration/: Tests for the HTTP, MCP and CLI front ends

Sensor tests live beside the sensors in hostsense/tests/.
"""
