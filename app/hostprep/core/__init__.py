"""Provisioning steps, configuration and the runner that sequences them."""
