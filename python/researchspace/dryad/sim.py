"""
A DryadClient implementation that simulates a Dryad service in memory.  It is useful for testing
and for demonstrating the adapter without access to a Dryad server.
"""
import secrets, string
from collections.abc import Mapping
from urllib.parse import quote

from . import DryadResourceNotFound, DryadCommError
from .client import DryadClient, FileContent
from .model import DryadSubmission, DryadDataset, DryadFile

class SimulatedDryadClient(DryadClient):
    """
    a DryadClient that keeps the datasets it creates in memory.

    This implementation will look for the following parameters from the configuration
    dictionary provided at construction time:

    ``doi_prefix``
        (*str*) *optional*.  the DOI prefix to use when minting dataset identifiers
        (default: "10.7959").
    ``available``
        (*bool*) *optional*.  if False, :py:meth:`test_connection` reports that the service is
        not available (default: True).
    ``offline``
        (*bool*) *optional*.  if True, all operations fail with a communication error, as if the
        service could not be reached (default: False).
    """
    client_name = "simulated"

    def __init__(self, server_url: str=None, token: str=None, config: Mapping=None):
        super(SimulatedDryadClient, self).__init__(config)
        self.server_url = server_url
        self.prefix = self.cfg.get('doi_prefix', "10.7959")
        self.available = self.cfg.get('available', True)
        self.offline = self.cfg.get('offline', False)
        self.datasets = {}
        self.files = {}

    def _check_online(self, resource):
        if self.offline:
            raise DryadCommError(resource, message="Simulated Dryad service is offline")

    def _mint_doi(self):
        alphabet = string.ascii_lowercase + string.digits
        while True:
            local = "".join(secrets.choice(alphabet) for i in range(9))
            doi = "doi:%s/dryad.%s" % (self.prefix, local)
            if doi not in self.datasets:
                return doi

    def create_submission(self, submission: DryadSubmission) -> DryadDataset:
        self._check_online("/datasets")
        doi = self._mint_doi()
        data = submission.to_json()
        data.update({
            "identifier":     doi,
            "id":             len(self.datasets) + 1,
            "versionNumber":  1,
            "versionStatus":  "in_progress",
            "curationStatus": "In progress",
            "editLink":       "/stash/edit/%s/%s" % (quote(doi, safe=''),
                                                     secrets.token_urlsafe(10))
        })
        self.datasets[doi] = data
        self.files[doi] = {}
        return DryadDataset(data)

    def stage_file(self, dataset_id: str, file_name: str, file: FileContent) -> DryadFile:
        resource = "/datasets/%s/files/%s" % (quote(dataset_id, safe=''), quote(file_name, safe=''))
        self._check_online(resource)
        if dataset_id not in self.datasets:
            raise DryadResourceNotFound(resource)

        if isinstance(file, (bytes, bytearray)):
            content = bytes(file)
        else:
            with open(file, 'rb') as fd:
                content = fd.read()

        self.files[dataset_id][file_name] = content
        return DryadFile({ "path": file_name, "size": len(content), "status": "created",
                           "mimeType": "application/octet-stream" })

    def test_connection(self) -> bool:
        self._check_online("/test")
        return bool(self.available)
