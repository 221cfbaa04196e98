"""
Clients for the Dryad REST API (version 2).

The :py:class:`DryadClient` base class defines the operations the adapter needs; the
:py:class:`DryadClientImpl` implementation carries them out against a Dryad server via HTTP.
"""
import logging, mimetypes
from abc import ABCMeta, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Union
from urllib.parse import quote

import requests

from researchspace.base.config import ConfigurationException
from . import (DryadServerError, DryadCommError, DryadClientError,
               DryadResourceNotFound, DryadAuthenticationError)
from .model import DryadSubmission, DryadDataset, DryadFile

__all__ = [ "DryadClient", "DryadClientImpl" ]

log = logging.getLogger(__name__)

FileContent = Union[str, Path, bytes]

class DryadClient(metaclass=ABCMeta):
    """
    the interface for creating and populating Dryad datasets
    """

    def __init__(self, config: Mapping=None):
        if config is None:
            config = {}
        self.cfg = config

    @abstractmethod
    def create_submission(self, submission: DryadSubmission) -> DryadDataset:
        """
        create a new, in-progress dataset in Dryad described by the given submission

        :return:  a description of the new dataset, including its identifier and edit link
        :raises DryadServiceException:  if the dataset could not be created
        """
        raise NotImplementedError()

    @abstractmethod
    def stage_file(self, dataset_id: str, file_name: str, file: FileContent) -> DryadFile:
        """
        upload a file into an in-progress dataset

        :param str dataset_id:  the identifier (DOI) of the dataset, as returned by
                                :py:meth:`create_submission`
        :param str  file_name:  the name to give the file within the dataset
        :param         file:    the file to upload, given either as the path to a local
                                file or as the file's contents (bytes)
        :raises DryadServiceException:  if the upload failed
        :raises OSError:  if a local file could not be read
        """
        raise NotImplementedError()

    @abstractmethod
    def test_connection(self) -> bool:
        """
        return True if the Dryad service can be reached and accepts our credentials

        :raises DryadServiceException:  if the service could not be contacted
        """
        raise NotImplementedError()

class DryadClientImpl(DryadClient):
    """
    a DryadClient that talks to a Dryad server through its REST API.

    This implementation will look for the following parameters from the configuration
    dictionary provided at construction time:

    ``timeout``
        (*float*) *optional*.  the number of seconds to wait for the server to respond to a
        request before giving up (default: 60).
    ``test_endpoint``
        (*str*) *optional*.  the API path (relative to the base URL) used to test the
        connection (default: "/test").
    """
    client_name = "dryad"
    DATASETS_EP = "/datasets"
    TEST_EP = "/test"

    def __init__(self, server_url: str, token: str, config: Mapping=None):
        """
        initialize the client

        :param str server_url:  the base URL for the API.  This should include everything up to
                                (and including) the version field (e.g. "https://.../api/v2").
        :param str      token:  the OAuth access token to present with each request
        :param dict    config:  the configuration for this client
        """
        super(DryadClientImpl, self).__init__(config)
        if not server_url:
            raise ConfigurationException("DryadClient: missing required server URL",
                                         param="server_url")
        if not token:
            raise ConfigurationException("DryadClient: missing required API token",
                                         param="identifier")

        self.baseurl = str(server_url).rstrip('/')
        self.timeout = self.cfg.get('timeout', 60)
        self._test_ep = self.cfg.get('test_endpoint', self.TEST_EP)
        self._authhdr = { "Authorization": f"Bearer {token}" }

    def _request(self, method: str, relurl: str, headers: Mapping=None, **kw):
        if not relurl.startswith('/'):
            relurl = '/'+relurl
        hdrs = { "Accept": "application/json" }
        if headers:
            hdrs.update(headers)
        hdrs.update(self._authhdr)

        try:
            return requests.request(method, self.baseurl+relurl, headers=hdrs,
                                    timeout=self.timeout, **kw)
        except requests.RequestException as ex:
            raise DryadCommError(relurl, cause=ex)

    def _check_response(self, relurl, resp, expected=(200,)) -> Mapping:
        if resp.status_code >= 500:
            raise DryadServerError(relurl, resp.status_code, resp.reason)
        elif resp.status_code in (401, 403):
            raise DryadAuthenticationError(relurl, resp.status_code, resp.reason)
        elif resp.status_code == 404:
            raise DryadResourceNotFound(relurl, resp.reason)
        elif resp.status_code >= 400:
            raise DryadClientError(relurl, resp.status_code, resp.reason)
        elif resp.status_code not in expected:
            raise DryadServerError(relurl, resp.status_code, resp.reason,
                                   message="Unexpected response from server: {0} {1}"
                                   .format(resp.status_code, resp.reason))

        try:
            return resp.json()
        except ValueError as ex:
            if resp.text and ("<body" in resp.text or "<BODY" in resp.text):
                raise DryadServerError(relurl,
                                       message="HTML returned where JSON "+
                                       "expected (is service URL correct?)", cause=ex)
            else:
                raise DryadServerError(relurl,
                                       message="Unable to parse response as "+
                                       "JSON (is service URL correct?)", cause=ex)

    def create_submission(self, submission: DryadSubmission) -> DryadDataset:
        relurl = self.DATASETS_EP
        resp = self._request("POST", relurl, { "Content-Type": "application/json" },
                             json=submission.to_json())
        data = self._check_response(relurl, resp, (200, 201))
        try:
            return DryadDataset.from_json(data)
        except ValueError as ex:
            raise DryadServerError(relurl, message="Unexpected dataset description from server",
                                   cause=ex)

    def stage_file(self, dataset_id: str, file_name: str, file: FileContent) -> DryadFile:
        if isinstance(file, (bytes, bytearray)):
            content = bytes(file)
        else:
            with open(file, 'rb') as fd:
                content = fd.read()

        ctype = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
        relurl = "%s/%s/files/%s" % (self.DATASETS_EP, quote(dataset_id, safe=''),
                                     quote(file_name, safe=''))
        log.debug("Staging %d bytes as %s", len(content), relurl)
        resp = self._request("PUT", relurl, { "Content-Type": ctype }, data=content)
        data = self._check_response(relurl, resp, (200, 201))
        try:
            return DryadFile.from_json(data)
        except ValueError as ex:
            raise DryadServerError(relurl, message="Unexpected file description from server",
                                   cause=ex)

    def test_connection(self) -> bool:
        resp = self._request("GET", self._test_ep)
        if resp.status_code != 200:
            log.warning("Dryad connection test failed: %s %s", resp.status_code, resp.reason)
            return False
        return True
