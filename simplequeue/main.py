#!/usr/bin/env python
import argparse
import os
import sys

import simplejson as json

import simplequeue.logging

from . import serialize
from .argparse import addArgumentParserBaseFlags
from .binutils import binDescriptionWithStandardFooter
from .config import Config, ConfigError
from .errors import NotFound, QueueError
from .hooks import HookRegistry
from .plugins import Plugins
from .repository import SqliteJobRepository
from .scheduler import BackgroundJobScheduler, InlineScheduler
from .service_layer import JobManager

_DEBUG_LOG_FILE_NAME = "simplequeue-debug"
LOG = simplequeue.logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2

DESC = binDescriptionWithStandardFooter("""
simple-queue - queue named hook jobs and inspect their results

Hooks are provided by plugins registered on the `simplequeue.hooks` entry
point.  A hook can only be queued when it is listed as queueable, either by
its plugin or in the [hooks] section of the rc file.
""")


def parseArgs(args=None):
    if args is None:
        prog = sys.argv[0]
        args = sys.argv[1:]
    else:
        prog = None

    op = argparse.ArgumentParser(
        prog=os.path.basename(prog) if prog else "simple-queue",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=DESC)
    addArgumentParserBaseFlags(op, _DEBUG_LOG_FILE_NAME)

    sub = op.add_subparsers(dest="action", metavar="ACTION")
    sub.required = True

    create = sub.add_parser("create", help="Queue a job for HOOK")
    create.add_argument("hook", metavar="HOOK")
    create.add_argument("--now", action="store_true",
                        help="Run the job inline instead of in the background")

    for name, helpText in (
            ("status", "Show the status of job ID"),
            ("results", "Show the results of job ID"),
            ("delete", "Delete job ID"),
            ("execute", "Run pending job ID now")):
        action = sub.add_parser(name, help=helpText)
        action.add_argument("jobId", metavar="ID", type=int)

    sub.add_parser("hooks", help="List known hooks")

    return op.parse_args(args)


def buildManager(config, scheduler, plugins=None):
    registry = HookRegistry(config.queueable)
    if plugins is None:
        plugins = Plugins()
    plugins.registerHooks(registry)
    repo = SqliteJobRepository(config.dbPath)
    return JobManager(repo, registry, scheduler,
                      schedule_delay=config.scheduleDelay)


def dumpJson(value):
    print(json.dumps(serialize.prepare(value), indent=2, sort_keys=True))


def handleAction(options, manager):
    if options.action == "create":
        jobId = manager.create(options.hook)
        print(jobId)
        if isinstance(manager.scheduler, BackgroundJobScheduler):
            manager.scheduler.wait()
    elif options.action == "status":
        print(manager.status(options.jobId))
    elif options.action == "results":
        dumpJson(manager.results(options.jobId))
    elif options.action == "delete":
        manager.delete(options.jobId)
    elif options.action == "execute":
        outcome = manager.execute(options.jobId)
        if not outcome.ok:
            raise outcome.error
        dumpJson(outcome.value)
    elif options.action == "hooks":
        registry = manager.registry
        for hook in registry.hooks():
            print("{} queueable={} handlers={}".format(
                hook,
                "yes" if registry.is_queueable(hook) else "no",
                len(registry.handlers(hook))))


def impl_main(args=None, plugins=None):
    options = parseArgs(args)
    config = Config(options)

    simplequeue.logging.setup(
        config.logDir,
        _DEBUG_LOG_FILE_NAME,
        debug=options.debug)
    LOG.debug("starting with args %s", options)
    LOG.debug("python: %s", sys.version)

    now = options.action == "create" and options.now
    scheduler = InlineScheduler() if now else BackgroundJobScheduler()
    manager = buildManager(config, scheduler, plugins=plugins)
    try:
        handleAction(options, manager)
    finally:
        manager.repo.close()
    return EXIT_OK


def main(args=None):
    try:
        rc = impl_main(args=args)
    except ConfigError as error:
        print("Error:", error, file=sys.stderr)
        rc = EXIT_ERROR
    except NotFound as error:
        print("Error:", error, file=sys.stderr)
        rc = EXIT_NOT_FOUND
    except QueueError as error:
        print("Error:", error, file=sys.stderr)
        rc = EXIT_ERROR
    sys.exit(rc)
