"""
a command-line interface to the Dryad adapter, useful for checking a Dryad configuration and
depositing data outside of the ResearchSpace application.  The :py:func:`main` function provides
the implementation.
"""
import sys, os, re, logging
from argparse import ArgumentParser

import yaml

from researchspace.base import config
from researchspace.base.config import ConfigurationException
from researchspace.repository import RepositoryConfig, SubmissionMetadata
from .adapter import DryadRSpaceRepository

prog = re.sub(r'\.py$', '', os.path.basename(sys.argv[0]))

TOKEN_ENV_VAR = "DRYAD_API_TOKEN"

class Failure(Exception):
    """
    an exception indicating that the command failed and should exit with a given code
    """

    def __init__(self, message: str, exitcode: int=1, cause: Exception=None):
        super(Failure, self).__init__(message)
        self.exitcode = exitcode
        self.cause = cause

def define_options(progname):
    """
    return an ArgumentParser instance that is configured with options
    for the command-line interface.
    """
    description = "Deposit data into the Dryad repository and query the adapter's settings"
    epilog = "The API token may also be provided via the %s environment variable" % TOKEN_ENV_VAR

    parser = ArgumentParser(progname, None, description, epilog)

    parser.add_argument('-c', '--config-file', type=str, dest='cfgfile', metavar='FILE',
                        help="a YAML or JSON file containing the configuration to use")
    parser.add_argument('-u', '--server-url', type=str, dest='serverurl', metavar='URL',
                        help="the base URL of the Dryad API (overrides the 'server_url' config "+
                             "property)")
    parser.add_argument('-t', '--token', type=str, dest='token', metavar='TOKEN',
                        help="the Dryad API token to authenticate with")
    parser.add_argument('-l', '--logfile', action='store', dest='logfile', type=str, metavar='FILE',
                        help="write messages that normally go to standard error to FILE as well.  "+
                             "If -q is also specified, the messages will only go to the logfile")
    parser.add_argument('-v', '--verbose', action='store_true', dest='verbose',
                        help="print more (debug) messages to standard error and/or the log file")
    parser.add_argument('-q', '--quiet', action='store_true', dest='quiet',
                        help="suppress all error and warning messages to standard error")

    subparsers = parser.add_subparsers(title="commands", dest='cmd', metavar='CMD')
    subparsers.add_parser('test', help="test the connection to the Dryad service")
    subparsers.add_parser('subjects', help="list the subjects (research domains) Dryad accepts")
    subparsers.add_parser('licenses', help="list the licenses Dryad accepts")
    dep = subparsers.add_parser('deposit', help="deposit a file into a new in-progress dataset")
    dep.add_argument('file', metavar='FILE', type=str, help="the file to deposit")
    dep.add_argument('-m', '--metadata', type=str, dest='mdfile', metavar='MDFILE', required=True,
                     help="a YAML or JSON file containing the metadata describing the deposit")

    return parser

def setup_logging(opts):
    rootlog = logging.getLogger()
    level = (opts.verbose and logging.DEBUG) or logging.INFO
    if opts.logfile:
        fmt = "%(asctime)s " + prog + ".%(name)s %(levelname)s: %(message)s"
        config.configure_log(logfile=opts.logfile, level=level, format=fmt)

    # configure a default log handler
    if not opts.quiet:
        fmt = prog + ": %(levelname)s: %(message)s"
        hdlr = logging.StreamHandler(sys.stderr)
        hdlr.setFormatter(logging.Formatter(fmt))
        hdlr.setLevel(logging.DEBUG)
        rootlog.addHandler(hdlr)
        rootlog.setLevel(level)
    elif not rootlog.handlers:
        rootlog.addHandler(logging.NullHandler())

def read_config(filepath):
    """
    read the configuration from a file having the given filepath

    :except Failure:  if the file cannot be read or its contents contains syntax or format errors
    """
    try:
        return config.load_from_file(filepath)
    except EnvironmentError as ex:
        raise Failure("problem reading config file, {0}: {1}".format(filepath, ex.strerror), 3, ex)
    except (ValueError, yaml.YAMLError) as ex:
        raise Failure("Config parsing error: "+str(ex), 3, ex)

def main(progname, args, out=None):
    """
    execute the command given by the command-line arguments
    """
    if out is None:
        out = sys.stdout
    parser = define_options(progname)
    opts = parser.parse_args(args)
    if not opts.cmd:
        raise Failure("No command given; use -h to see available commands", 2)

    setup_logging(opts)

    cfg = {}
    if opts.cfgfile:
        cfg = read_config(opts.cfgfile)

    try:
        adapter = DryadRSpaceRepository(cfg.get('adapter', {}))
    except ConfigurationException as ex:
        raise Failure("Adapter configuration error: "+str(ex), 3, ex)

    if opts.cmd == 'subjects':
        for subj in adapter.get_subjects():
            out.write(subj.name + "\n")
        return
    if opts.cmd == 'licenses':
        for lic in adapter.get_license_config_info().licenses:
            out.write("%s\t%s\n" % (lic.license_definition.name, lic.license_definition.url))
        return

    serverurl = opts.serverurl or cfg.get('server_url')
    token = opts.token or cfg.get('token') or os.environ.get(TOKEN_ENV_VAR)
    if not serverurl:
        raise Failure("Dryad server URL not set; use -u or set server_url in the configuration", 2)
    try:
        adapter.configure(RepositoryConfig(serverurl, token))
    except ConfigurationException as ex:
        raise Failure(str(ex), 3, ex)

    if opts.cmd == 'test':
        result = adapter.test_connection()
    else:
        metadata = SubmissionMetadata.from_json(read_config(opts.mdfile))
        result = adapter.submit_deposit(None, opts.file, metadata)

    if not result.succeeded:
        raise Failure(result.message, 4)
    out.write(result.message + "\n")
    if result.url:
        out.write(result.url + "\n")
