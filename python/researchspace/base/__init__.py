"""
Common infrastructure shared by the ResearchSpace repository adapters:  a base exception class and
the configuration utilities in :py:mod:`researchspace.base.config`.
"""
try:
    from .version import __version__
except ImportError:
    __version__ = "(unset)"

class ResearchSpaceException(Exception):
    """
    a general base class for exceptions raised by the ResearchSpace repository adapter code
    """

    def __init__(self, message: str=None, cause: Exception=None):
        """
        create the exception

        :param str message:   a description of the problem
        :param Exception cause:  the exception that triggered this one, if any
        """
        if not message:
            message = str(cause) if cause else "Unknown ResearchSpace adapter error"
        super(ResearchSpaceException, self).__init__(message)
        self.cause = cause
