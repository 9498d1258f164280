"""Sample data generators."""

from financing_core.generators.base import BaseGenerator
from financing_core.generators.financing import FinancingGenerator

__all__ = ["BaseGenerator", "FinancingGenerator"]
