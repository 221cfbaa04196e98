"""
Utilities for reading and applying configuration data.

Configuration for the adapters is a (JSON-like) dictionary.  It can be read from a YAML or JSON
file via :py:func:`load_from_file`, combined with defaults via :py:func:`merge_config`, and used
to set up logging via :py:func:`configure_log`.
"""
import os, sys, json, logging
from collections.abc import Mapping
from copy import deepcopy

import yaml

from . import ResearchSpaceException

__all__ = [ "ConfigurationException", "load_from_file", "merge_config", "configure_log",
            "NORMAL", "LOG_FORMAT" ]

NORMAL = logging.INFO
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"

class ConfigurationException(ResearchSpaceException):
    """
    an exception indicating a problem with the configuration of an adapter or one of its
    components, such as a missing or invalid parameter value.
    """

    def __init__(self, message: str=None, cause: Exception=None, param: str=None):
        """
        create the exception

        :param str message:      a description of the configuration problem
        :param Exception cause:  the exception that revealed the problem, if any
        :param str param:        the name of the offending configuration parameter, if known
        """
        if not message:
            message = "Configuration problem"
            if param:
                message += " with parameter, " + param
            if cause:
                message += ": " + str(cause)
        super(ConfigurationException, self).__init__(message, cause)
        self.param = param

def load_from_file(configfile: str) -> Mapping:
    """
    read the configuration from the given file and return it as a dictionary.  The file
    extension determines the format:  ".yml" or ".yaml" is read as YAML; everything else
    is read as JSON.

    :raises IOError:     if the file cannot be opened or read
    :raises ValueError:  if the JSON contents cannot be parsed
    :raises yaml.YAMLError:  if the YAML contents cannot be parsed
    """
    with open(configfile) as fd:
        if configfile.endswith(".yml") or configfile.endswith(".yaml"):
            out = yaml.safe_load(fd)
        else:
            out = json.load(fd)

    if out is None:
        out = {}
    if not isinstance(out, Mapping):
        raise ValueError("%s: configuration data is not an object/dictionary" % configfile)
    return out

def merge_config(primary: Mapping, defconf: Mapping) -> Mapping:
    """
    merge two configurations, with the values in the first overriding those in the second.
    Dictionary values are merged recursively; all other values (including lists) are replaced.
    Neither input is altered.

    :param dict primary:  the configuration whose values take precedence
    :param dict defconf:  the default configuration
    """
    out = deepcopy(defconf) if defconf else {}
    for key, val in (primary or {}).items():
        if isinstance(val, Mapping) and isinstance(out.get(key), Mapping):
            out[key] = merge_config(val, out[key])
        else:
            out[key] = deepcopy(val)
    return out

_log_handler = None

def configure_log(logfile: str=None, level: int=None, format: str=None, config: Mapping=None,
                  addstderr: bool=False):
    """
    set up logging to a file for the root logger.  Values given as arguments take precedence
    over those given in the configuration.  This function is intended for use by command-line
    programs; the adapter classes themselves only write to module loggers.

    The following configuration parameters are recognized:

    ``logfile``
         (*str*) the path of the file to write log messages to.  If relative, it is
         interpreted relative to ``logdir``.
    ``logdir``
         (*str*) the directory where the log file should be written (default: the current
         directory)
    ``loglevel``
         (*str* or *int*) the minimum level of messages to record (default: INFO)

    :param str logfile:  the path of the log file to write to
    :param int   level:  the logging level threshold
    :param str  format:  the message format template for the log file
    :param dict config:  the configuration containing the parameters listed above
    :param bool addstderr:  if True, also send messages to standard error
    :return: the root logger
    """
    global _log_handler
    if config is None:
        config = {}
    if not logfile:
        logfile = config.get('logfile')
    if level is None:
        level = config.get('loglevel', NORMAL)
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                raise ConfigurationException("loglevel: not a recognized logging level: " +
                                             str(config.get('loglevel')), param="loglevel")
    if not format:
        format = LOG_FORMAT

    rootlog = logging.getLogger()
    if logfile:
        if not os.path.isabs(logfile):
            logfile = os.path.join(config.get('logdir', os.getcwd()), logfile)
        if _log_handler:
            rootlog.removeHandler(_log_handler)
            _log_handler.close()
        _log_handler = logging.FileHandler(logfile)
        _log_handler.setLevel(logging.DEBUG)
        _log_handler.setFormatter(logging.Formatter(format))
        rootlog.addHandler(_log_handler)

    if addstderr:
        hdlr = logging.StreamHandler(sys.stderr)
        hdlr.setLevel(logging.DEBUG)
        hdlr.setFormatter(logging.Formatter(format))
        rootlog.addHandler(hdlr)

    rootlog.setLevel(level)
    return rootlog
