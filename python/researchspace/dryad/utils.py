"""
Utility functions providing the reference data Dryad expects:  its research domains (used as
subjects) and the licenses it supports.
"""
import json, logging
from importlib import resources
from pathlib import Path
from typing import List

from researchspace.base.config import ConfigurationException
from researchspace.repository import Subject, License, LicenseDef

log = logging.getLogger(__name__)

DOMAINS_RESOURCE = "dryad-research-domains.json"
CC0_URL = "https://creativecommons.org/publicdomain/zero/1.0/"
CC0_NAME = "CC-0"

def _read_domains_doc(domainsfile=None) -> str:
    if domainsfile:
        return Path(domainsfile).read_text(encoding="utf-8")
    res = resources.files(__package__).joinpath("data").joinpath(DOMAINS_RESOURCE)
    return res.read_text(encoding="utf-8")

def get_dryad_subjects(domainsfile: str=None) -> List[Subject]:
    """
    return the list of subjects from the Dryad research domains JSON document, in document order.

    :param str domainsfile:  the path to an alternate domains document; if not provided, the one
                             bundled with this package is read.
    :raises ConfigurationException:  if the document cannot be read or does not contain a
                             list of domain names under the "domains" property
    """
    src = domainsfile or DOMAINS_RESOURCE
    try:
        doc = json.loads(_read_domains_doc(domainsfile))
    except (OSError, ValueError) as ex:
        log.error("Error reading dryad research domains from %s: %s", src, str(ex))
        raise ConfigurationException("Unable to load Dryad research domains from %s: %s" %
                                     (src, str(ex)), cause=ex)

    domains = doc.get("domains") if isinstance(doc, dict) else None
    if not isinstance(domains, list) or not all(isinstance(d, str) for d in domains):
        raise ConfigurationException("%s: missing or malformed 'domains' list" % src)

    return [Subject(d) for d in domains]

def get_dryad_licenses() -> List[License]:
    """
    return the licenses that Dryad accepts.  Dryad publishes all data under the Creative
    Commons Zero (public domain) dedication, so this is the only one returned.
    """
    return [ License(LicenseDef(CC0_URL, CC0_NAME)) ]
