"""
The ResearchSpace repository adapter for Dryad.

A deposit happens in two calls to the Dryad API:  the submission metadata (converted from the
host's :py:class:`~researchspace.repository.SubmissionMetadata` by
:py:func:`create_dryad_submission`) is used to create an in-progress (draft) dataset, and then
the exported file is staged into that dataset.  The user is then directed to the dataset's edit
page on the Dryad site to complete and submit it for curation.
"""
import json, logging, re
from collections.abc import Mapping
from pathlib import Path
from typing import List, Union
from urllib.parse import urlsplit

from researchspace.base.config import ConfigurationException, merge_config
from researchspace.repository import (IRepository, RepositoryConfigurer, RepositoryConfig,
                                      RepositoryOperationResult, SubmissionMetadata, Depositor,
                                      Subject, LicenseConfigInfo)
from . import (DryadServiceException, SubmissionMetadataError, DepositURLError,
               create_dryad_client)
from .client import DryadClient
from .model import DryadAuthor, DryadFunder, DryadSubmission, DryadDataset
from .utils import get_dryad_subjects, get_dryad_licenses

__all__ = [ "DryadRSpaceRepository", "create_dryad_submission", "get_dryad_authors",
            "get_dryad_funders", "license_as_string", "FUNDER_PROPERTY" ]

log = logging.getLogger(__name__)

FUNDER_PROPERTY = "funder"

DEF_CONFIG = {
    "client": { "name": "dryad" }
}

def create_dryad_submission(metadata: SubmissionMetadata) -> DryadSubmission:
    """
    convert the host's submission metadata into a submission for creating a Dryad dataset.
    Dryad takes a single field of science, so only the first of the given subjects is used.

    :raises SubmissionMetadataError:  if no subjects are given
    """
    if not metadata.subjects:
        raise SubmissionMetadataError("at least one subject is required", "subjects")

    return DryadSubmission(title=metadata.title,
                           abstract=metadata.description,
                           field_of_science=metadata.subjects[0],
                           authors=get_dryad_authors(metadata.authors),
                           funders=get_dryad_funders(metadata.other_properties),
                           license=license_as_string(metadata.license))

def get_dryad_authors(authors: List[Depositor]) -> List[DryadAuthor]:
    """
    convert the given depositors into Dryad authors, preserving their order.  The depositor's
    display name is used as the first name; it is not split into given and family names.
    """
    return [DryadAuthor(first_name=a.unique_name, email=a.email) for a in (authors or [])]

def get_dryad_funders(other_properties: Mapping) -> List[DryadFunder]:
    """
    extract the funder from the host's extra properties.  The funder is given as a single
    JSON-encoded object under the "funder" property.  An empty list is returned if the property
    is not set or cannot be parsed.
    """
    funder = (other_properties or {}).get(FUNDER_PROPERTY)
    if funder is None:
        log.debug("No %s property provided with submission", FUNDER_PROPERTY)
        return []

    try:
        return [DryadFunder.from_json(json.loads(funder))]
    except (ValueError, TypeError) as ex:
        log.error("Unable to parse %s property as a JSON object: %s", FUNDER_PROPERTY, str(ex))
        return []

def license_as_string(license) -> str:
    """
    return the license as it should be sent to Dryad:  an empty string if no license was chosen
    """
    if license is None:
        return ""
    return str(license)

class DryadRSpaceRepository(IRepository, RepositoryConfigurer):
    """
    an IRepository implementation that deposits into Dryad.

    This implementation will look for the following parameters from the configuration
    dictionary provided at construction time:

    ``client``
        (*dict*) *optional*.  the configuration for the Dryad client; its ``name`` parameter
        selects the implementation (see :py:func:`~researchspace.dryad.create_dryad_client`);
        by default, the real Dryad service client is used.
    ``subjects_file``
        (*str*) *optional*.  the path to a research domains JSON document to use in place of the
        one bundled with this package.
    ``base_url``
        (*str*) *optional*.  the base URL of the Dryad web site, used to form links to edit
        deposited datasets.  By default, this is derived from the server URL given to
        :py:meth:`configure`.

    The reference data (subjects and licenses) is loaded at construction time.
    """

    def __init__(self, config: Mapping=None, client: DryadClient=None):
        """
        initialize the adapter

        :param dict config:         the configuration for this adapter
        :param DryadClient client:  the client to use to talk to Dryad; if provided, it will
                                    not be replaced when :py:meth:`configure` is called.
        :raises ConfigurationException:  if the reference data cannot be loaded
        """
        self.cfg = merge_config(config, DEF_CONFIG)
        self._client = client
        self._keep_client = client is not None
        self._baseurl = (self.cfg.get('base_url') or '').rstrip('/') or None

        self._subjects = tuple(get_dryad_subjects(self.cfg.get('subjects_file')))
        self._licenses = tuple(get_dryad_licenses())

    @property
    def dryad_client(self) -> DryadClient:
        """the client used to talk to Dryad (None if not configured)"""
        return self._client

    @dryad_client.setter
    def dryad_client(self, client: DryadClient):
        self._client = client

    @property
    def dryad_base_url(self) -> str:
        """the base URL of the Dryad site that edit links are relative to"""
        return self._baseurl

    def configure(self, config: RepositoryConfig):
        """
        set up the connection to Dryad.  ``config.server_url`` should be the URL of the Dryad
        API (e.g. "https://datadryad.org/api/v2"), and ``config.identifier``, the API token.

        :raises ConfigurationException:  if the server URL is not an absolute URL or a client
                                         cannot otherwise be created from the configuration
        """
        # nothing is changed unless the whole configuration is usable
        baseurl = self._baseurl
        if not self.cfg.get('base_url'):
            apiurl = urlsplit(str(config.server_url or ''))
            if not apiurl.scheme or not apiurl.hostname:
                raise ConfigurationException("Dryad server URL is not an absolute URL: " +
                                             str(config.server_url), param="server_url")
            baseurl = apiurl.scheme + "://" + apiurl.hostname
            if apiurl.port:
                baseurl += ":%d" % apiurl.port

        client = self._client
        if not self._keep_client:
            client = create_dryad_client(config.server_url, config.identifier,
                                         self.cfg.get('client'))

        self._client = client
        self._baseurl = baseurl

    def submit_deposit(self, depositor: Depositor, file: Union[str, Path],
                       metadata: SubmissionMetadata,
                       config: RepositoryConfig=None) -> RepositoryOperationResult:
        """
        deposit the given file into a new in-progress Dryad dataset.  The dataset is not
        submitted for curation; instead, the returned result includes the URL of the page where
        the user can complete and submit it.

        Any failure is reported through the returned result rather than raised.

        :param Depositor depositor:  the user making the deposit (not used by Dryad)
        :param file:  the path to the file to deposit
        :param SubmissionMetadata metadata:  the description of the data; at least one subject
                                     must be included.
        :param RepositoryConfig config:  ignored; the configuration given to :py:meth:`configure`
                                     is used.
        """
        if not self._client:
            return RepositoryOperationResult(False, "Dryad adapter is not configured", None)

        log.debug("Starting deposit of %s into dryad", str(file))
        try:
            submission = create_dryad_submission(metadata)
            dataset = self._client.create_submission(submission)
            log.debug("Created in-progress dataset: %s", dataset.identifier)

            self._client.stage_file(dataset.identifier, Path(file).name, file)
            log.debug("Staged file %s into %s", Path(file).name, dataset.identifier)

            editurl = self.edit_url_for(dataset)
            log.debug("editUrl: %s", editurl)
            return RepositoryOperationResult(True, "Export uploaded to dryad successfully.", editurl)

        except SubmissionMetadataError as ex:
            log.error("Invalid submission metadata for dryad", exc_info=True)
            return RepositoryOperationResult(False, "Invalid submission metadata: "+str(ex), None)
        except DryadServiceException as ex:
            log.error("Transport error occurred while submitting to dryad", exc_info=True)
            return RepositoryOperationResult(False, "Transport error occurred while submitting "+
                                             "to dryad: "+str(ex), None)
        except DepositURLError as ex:
            log.error("Malformed URL error occurred while submitting to dryad", exc_info=True)
            return RepositoryOperationResult(False, "Malformed URL error occurred while "+
                                             "submitting to dryad: "+str(ex), None)
        except OSError as ex:
            log.error("I/O error occurred while submitting to dryad", exc_info=True)
            return RepositoryOperationResult(False, "I/O error occurred while submitting to "+
                                             "dryad: "+str(ex), None)

    def edit_url_for(self, dataset: DryadDataset) -> str:
        """
        return the absolute URL of the page for editing the given dataset on the Dryad site

        :raises DepositURLError:  if a valid URL cannot be formed from the dataset's edit link
        """
        link = dataset.edit_link
        if not isinstance(link, str) or not link.startswith('/') or re.search(r'\s', link):
            raise DepositURLError("Not a usable edit link: %r" % link)
        if not self._baseurl:
            raise DepositURLError("Dryad base URL is not set")

        url = self._baseurl + link
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise DepositURLError("Not an absolute web URL: " + url)
        return url

    def test_connection(self) -> RepositoryOperationResult:
        """
        check that Dryad can be reached with the configured server URL and token
        """
        if not self._client:
            return RepositoryOperationResult(False, "Dryad adapter is not configured", None)
        try:
            if self._client.test_connection():
                return RepositoryOperationResult(True, "Test connection OK!", None)
            else:
                return RepositoryOperationResult(False, "Test connection failed - please check "+
                                                 "settings.", None)
        except DryadServiceException as ex:
            log.error("Couldn't perform test action: %s", str(ex))
            return RepositoryOperationResult(False, "Test connection failed - " + str(ex), None)

    def get_configurer(self) -> RepositoryConfigurer:
        return self

    def get_subjects(self) -> List[Subject]:
        return list(self._subjects)

    def get_license_config_info(self) -> LicenseConfigInfo:
        return LicenseConfigInfo(True, False, list(self._licenses))

    def get_other_properties(self) -> Mapping:
        return {}
