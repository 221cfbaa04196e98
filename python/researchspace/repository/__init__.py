"""
a subpackage that defines the interface between the ResearchSpace host application and the
adapters that deposit data into external repositories.

The :py:class:`~researchspace.repository.spi.IRepository` base class defines the interface.
"""
from .spi import *
