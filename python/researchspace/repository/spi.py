"""
The contract between the ResearchSpace host application and a repository adapter.

The host creates an adapter (an :py:class:`IRepository`), configures it with a
:py:class:`RepositoryConfig`, and then calls upon it to deposit exported data, test its connection
to the repository, and report the subjects and licenses the repository supports.  Outcomes of
actions are reported exclusively through :py:class:`RepositoryOperationResult` values.
"""
from abc import ABCMeta, abstractmethod
from collections import namedtuple
from collections.abc import Mapping
from pathlib import Path
from typing import List, Union

__all__ = [ "RepositoryConfig", "RepositoryOperationResult", "Subject", "LicenseDef", "License",
            "LicenseConfigInfo", "RepoProperty", "Depositor", "SubmissionMetadata",
            "RepositoryConfigurer", "IRepository" ]

RepositoryConfig = namedtuple("RepositoryConfig", "server_url identifier password repository_name",
                              defaults=("", ""))
RepositoryConfig.__doc__ = \
"""
the host-supplied connection settings for a repository:  ``server_url`` is the URL of the
repository's API, and ``identifier`` is the credential (e.g. an API token) that identifies the
depositing application to it.
"""

RepositoryOperationResult = namedtuple("RepositoryOperationResult", "succeeded message url",
                                       defaults=(None,))
RepositoryOperationResult.__doc__ = \
"""
the outcome of an adapter operation.  ``url``, when set, points to where the user can view the
result of a successful operation.
"""

Subject = namedtuple("Subject", "name")
LicenseDef = namedtuple("LicenseDef", "url name")
License = namedtuple("License", "license_definition default_license", defaults=(False,))
LicenseConfigInfo = namedtuple("LicenseConfigInfo",
                               "license_required other_license_permitted licenses")
RepoProperty = namedtuple("RepoProperty", "name required value", defaults=(False, None))

Depositor = namedtuple("Depositor", "unique_name email")
Depositor.__doc__ = \
"""
a person depositing data or credited as an author of it.  ``unique_name`` is the name the host
displays for the person.
"""

class SubmissionMetadata:
    """
    the descriptive metadata the host collects from the user for a deposit.  Adapters treat an
    instance as read-only.

    ``other_properties`` holds repository-specific values keyed by property name; the values are
    raw strings (possibly JSON-encoded).
    """

    def __init__(self, title: str=None, description: str=None, subjects: List[str]=None,
                 authors: List[Depositor]=None, contacts: List[Depositor]=None,
                 license: str=None, publish: bool=False, other_properties: Mapping=None):
        self.title = title
        self.description = description
        self.subjects = list(subjects) if subjects is not None else []
        self.authors = list(authors) if authors is not None else []
        self.contacts = list(contacts) if contacts is not None else []
        self.license = license
        self.publish = publish
        self.other_properties = dict(other_properties) if other_properties is not None else {}

    @classmethod
    def from_json(cls, data: Mapping):
        """
        create an instance from a JSON object (as loaded by :py:func:`json.load`).  Authors and
        contacts are given as objects with ``uniqueName`` and ``email`` properties.
        """
        def persons(key):
            return [Depositor(p.get('uniqueName'), p.get('email')) for p in data.get(key, [])]

        return cls(data.get('title'), data.get('description'), data.get('subjects'),
                   persons('authors'), persons('contacts'), data.get('license'),
                   data.get('publish', False), data.get('otherProperties'))

class RepositoryConfigurer(metaclass=ABCMeta):
    """
    the part of the adapter interface that reports the options the repository supports
    """

    @abstractmethod
    def get_subjects(self) -> List[Subject]:
        """
        return the subject terms that may be used to classify a deposit
        """
        raise NotImplementedError()

    @abstractmethod
    def get_license_config_info(self) -> LicenseConfigInfo:
        """
        return the licenses the repository accepts and whether a license is required
        """
        raise NotImplementedError()

    @abstractmethod
    def get_other_properties(self) -> Mapping:
        """
        return descriptions (as :py:class:`RepoProperty` values) of any additional,
        repository-specific metadata properties, keyed by name
        """
        raise NotImplementedError()

class IRepository(metaclass=ABCMeta):
    """
    the interface a repository adapter implements for the host
    """

    @abstractmethod
    def configure(self, config: RepositoryConfig):
        """
        set up the adapter to talk to the repository described by the given configuration.
        """
        raise NotImplementedError()

    @abstractmethod
    def submit_deposit(self, depositor: Depositor, file: Union[str, Path],
                       metadata: SubmissionMetadata,
                       config: RepositoryConfig=None) -> RepositoryOperationResult:
        """
        deposit the given file, described by the given metadata, into the repository
        """
        raise NotImplementedError()

    @abstractmethod
    def test_connection(self) -> RepositoryOperationResult:
        """
        check that the repository is reachable with the configured settings
        """
        raise NotImplementedError()

    @abstractmethod
    def get_configurer(self) -> RepositoryConfigurer:
        """
        return the object that reports the repository's supported options
        """
        raise NotImplementedError()
