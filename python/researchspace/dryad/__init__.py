"""
An adapter that lets ResearchSpace deposit exported data into the Dryad data repository
(https://datadryad.org) via Dryad's REST API.

The :py:class:`~researchspace.dryad.adapter.DryadRSpaceRepository` class implements the host's
:py:class:`~researchspace.repository.IRepository` interface; it talks to Dryad through a
:py:class:`~researchspace.dryad.client.DryadClient`, created via :py:func:`create_dryad_client`.
"""
from collections.abc import Mapping

from researchspace.base import ResearchSpaceException
from researchspace.base.config import ConfigurationException

try:
    from .version import __version__
except ImportError:
    __version__ = "(unset)"

class DryadException(ResearchSpaceException):
    """
    a general base class for exceptions that occur while depositing data into Dryad
    """
    pass

class DryadServiceException(DryadException):
    """
    an exception indicating a problem using the Dryad API.  This covers all failures of the
    transport layer (network errors and unsuccessful responses).

    This exception includes three extra public properties, ``code``, ``status``, and
    ``resource`` which capture the HTTP response status code, the associated HTTP response
    message, and (optionally) the API resource being accessed.
    """

    def __init__(self, resource=None, http_code=None, http_reason=None, message=None, cause=None):
        if not message:
            if resource:
                message = f"Trouble accessing {resource} from the Dryad service"
            else:
                message = "Problem accessing the Dryad service"
            if http_code or http_reason:
                message += ":"
                if http_code:
                    message += " "+str(http_code)
                if http_reason:
                    message += " "+str(http_reason)
            elif cause:
                message += ": "+str(cause)

        super(DryadServiceException, self).__init__(message, cause)
        self.resource = resource
        self.code = http_code
        self.status = http_reason

class DryadServerError(DryadServiceException):
    """
    an exception indicating an error occurred on the server-side while trying to access the
    Dryad service (or that the server returned a response that could not be understood).
    """
    pass

class DryadCommError(DryadServiceException):
    """
    an exception indicating a failure communicating with the Dryad service:  failures to connect,
    dropped connections, DNS errors, timeouts, etc.  The service did not get a chance to respond
    to the request.
    """

    def __init__(self, resource=None, message=None, cause=None):
        if not message:
            message = "Dryad service communication failure"
            if resource:
                message += f" while accessing {resource}"
            if cause:
                message += ": "+str(cause)
        super(DryadCommError, self).__init__(resource, message=message, cause=cause)

class DryadClientError(DryadServiceException):
    """
    an exception indicating that the Dryad service rejected a request as erroneous
    (a 4xx response).
    """

    def __init__(self, resource, http_code, http_reason, message=None, cause=None):
        if not message:
            message = "client-side Dryad error occurred"
            if resource:
                message += " while processing " + resource
            message += ": {0} {1}".format(http_code, http_reason)

        super(DryadClientError, self).__init__(resource, http_code, http_reason, message, cause)

class DryadResourceNotFound(DryadClientError):
    """
    an exception indicating that a requested resource is not available from the Dryad service
    """

    def __init__(self, resource, http_reason=None, message=None, cause=None):
        if not message:
            message = "Requested Dryad resource not found"
            if resource:
                message += ": "+resource
        super(DryadResourceNotFound, self).__init__(resource, 404, http_reason, message, cause)

class DryadAuthenticationError(DryadClientError):
    """
    an exception indicating that the Dryad service did not accept the credentials (API token)
    sent with a request
    """

    def __init__(self, resource, http_code=401, http_reason=None, message=None, cause=None):
        if not message:
            message = "Dryad service did not accept our credentials"
            if resource:
                message += " while accessing " + resource
            message += ": {0} {1}".format(http_code, http_reason or "")
        super(DryadAuthenticationError, self).__init__(resource, http_code, http_reason,
                                                       message.rstrip(), cause)

class SubmissionMetadataError(DryadException):
    """
    an exception indicating that the metadata provided for a deposit cannot be converted into a
    Dryad submission (e.g. because no subject was given).
    """

    def __init__(self, message, field: str=None):
        super(SubmissionMetadataError, self).__init__(message)
        self.field = field

class DepositURLError(DryadException):
    """
    an exception indicating that a valid URL for viewing a deposit could not be formed from the
    information returned by the Dryad service
    """
    pass

from .client import DryadClient, DryadClientImpl
from .sim import SimulatedDryadClient

__all__ = [ "DryadException", "DryadServiceException", "DryadServerError", "DryadCommError",
            "DryadClientError", "DryadResourceNotFound", "DryadAuthenticationError",
            "SubmissionMetadataError", "DepositURLError", "DryadClient", "create_dryad_client" ]

_client_classes = {
    DryadClientImpl.client_name:       DryadClientImpl,
    SimulatedDryadClient.client_name:  SimulatedDryadClient
}

def create_dryad_client(server_url: str, token: str, config: Mapping=None) -> DryadClient:
    """
    a factory function that creates a client for the Dryad API.

    The ``name`` parameter in the given configuration selects the client implementation:
    "dryad" (the default) talks to the real service; "simulated" keeps datasets in memory.  All
    other configuration parameters are passed to the implementation.

    :param str server_url:  the base URL of the Dryad API (e.g. "https://datadryad.org/api/v2")
    :param str      token:  the API token to authenticate with
    :param dict    config:  the client configuration
    :raises ConfigurationException: if the ``name`` value is not recognized or the client
                                    otherwise cannot be configured with the given inputs
    """
    if not config:
        config = {}

    name = config.get('name', DryadClientImpl.client_name)
    cls = _client_classes.get(name)
    if not cls:
        raise ConfigurationException("dryad client: name not supported: "+str(name), param="name")

    return cls(server_url, token, config)
