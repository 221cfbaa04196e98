"""
Records exchanged with the Dryad API:  the submission sent to create a draft dataset and the
descriptions of datasets and files that Dryad returns.

Each class converts to (``to_json()``) and/or from (``from_json()``) the JSON object form used by
the API (camel-cased property names).
"""
from collections.abc import Mapping
from typing import List

__all__ = [ "DryadAuthor", "DryadFunder", "DryadSubmission", "DryadDataset", "DryadFile" ]

class DryadAuthor:
    """
    an author of a Dryad dataset
    """

    def __init__(self, first_name: str=None, last_name: str=None, email: str=None,
                 affiliation: str=None):
        self.first_name = first_name
        self.last_name = last_name
        self.email = email
        self.affiliation = affiliation

    def to_json(self) -> Mapping:
        out = { "firstName": self.first_name }
        if self.last_name:
            out["lastName"] = self.last_name
        if self.email:
            out["email"] = self.email
        if self.affiliation:
            out["affiliation"] = self.affiliation
        return out

    def __eq__(self, other):
        return isinstance(other, DryadAuthor) and self.to_json() == other.to_json()

    def __repr__(self):
        return "DryadAuthor(%r, %r)" % (self.first_name, self.email)

class DryadFunder:
    """
    an organization that funded the work behind a Dryad dataset
    """

    def __init__(self, organization: str=None, award_number: str=None, identifier: str=None,
                 identifier_type: str=None):
        self.organization = organization
        self.award_number = award_number
        self.identifier = identifier
        self.identifier_type = identifier_type

    @classmethod
    def from_json(cls, data: Mapping):
        """
        create a funder from its JSON description.  Properties not part of a Dryad funder
        description are ignored.

        :raises ValueError:  if the input is not a JSON object
        """
        if not isinstance(data, Mapping):
            raise ValueError("funder description is not a JSON object: "+repr(data))
        return cls(data.get("organization"), data.get("awardNumber"), data.get("identifier"),
                   data.get("identifierType"))

    def to_json(self) -> Mapping:
        out = {}
        for prop, val in (("organization", self.organization),
                          ("awardNumber", self.award_number),
                          ("identifier", self.identifier),
                          ("identifierType", self.identifier_type)):
            if val is not None:
                out[prop] = val
        return out

    def __eq__(self, other):
        return isinstance(other, DryadFunder) and self.to_json() == other.to_json()

    def __repr__(self):
        return "DryadFunder(%r, %r)" % (self.organization, self.award_number)

class DryadSubmission:
    """
    the metadata sent to Dryad to create a new, in-progress dataset
    """

    def __init__(self, title: str=None, abstract: str=None, field_of_science: str=None,
                 authors: List[DryadAuthor]=None, funders: List[DryadFunder]=None,
                 license: str=""):
        self.title = title
        self.abstract = abstract
        self.field_of_science = field_of_science
        self.authors = authors if authors is not None else []
        self.funders = funders if funders is not None else []
        self.license = license

    def to_json(self) -> Mapping:
        return {
            "title":          self.title,
            "abstract":       self.abstract,
            "fieldOfScience": self.field_of_science,
            "authors":        [a.to_json() for a in self.authors],
            "funders":        [f.to_json() for f in self.funders],
            "license":        self.license
        }

class DryadDataset:
    """
    a description of a dataset as returned by the Dryad API.  The full JSON description is
    available via the ``data`` property.
    """

    def __init__(self, data: Mapping):
        self.data = data

    @classmethod
    def from_json(cls, data: Mapping):
        if not isinstance(data, Mapping):
            raise ValueError("dataset description is not a JSON object")
        if not isinstance(data.get("identifier"), str) or not data["identifier"]:
            raise ValueError("dataset description is missing its identifier")
        return cls(data)

    @property
    def identifier(self) -> str:
        """the dataset's DOI (e.g. "doi:10.7959/dryad.5dv41ns2h")"""
        return self.data.get("identifier")

    @property
    def id(self):
        """Dryad's internal identifier for the dataset"""
        return self.data.get("id")

    @property
    def edit_link(self) -> str:
        """the path, relative to the Dryad server, of the web page for editing the dataset"""
        return self.data.get("editLink")

    @property
    def title(self) -> str:
        return self.data.get("title")

    @property
    def version_status(self) -> str:
        return self.data.get("versionStatus")

    @property
    def curation_status(self) -> str:
        return self.data.get("curationStatus")

class DryadFile:
    """
    a description of a file staged into a Dryad dataset
    """

    def __init__(self, data: Mapping=None):
        self.data = data if data is not None else {}

    @classmethod
    def from_json(cls, data: Mapping):
        if not isinstance(data, Mapping):
            raise ValueError("file description is not a JSON object")
        return cls(data)

    @property
    def path(self) -> str:
        return self.data.get("path")

    @property
    def size(self) -> int:
        return self.data.get("size")

    @property
    def mime_type(self) -> str:
        return self.data.get("mimeType")

    @property
    def status(self) -> str:
        return self.data.get("status")
