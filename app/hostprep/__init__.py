"""hostprep - one-time post-installation provisioning for Debian/Ubuntu hosts."""

__version__ = "0.1.0"
