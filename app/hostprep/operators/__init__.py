"""Package operators for querying and installing packages.

This module provides the abstract operator interface and the APT
implementation used during provisioning.
"""

from hostprep.operators.apt import AptOperator
from hostprep.operators.base import Operator

__all__ = ["Operator", "AptOperator"]
