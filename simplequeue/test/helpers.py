import os
import shutil
import tempfile

from simplequeue.errors import HookError
from simplequeue.hooks import HookRegistry
from simplequeue.repository import SqliteJobRepository
from simplequeue.scheduler import Scheduler
from simplequeue.service_layer import JobManager


class RecordingScheduler(Scheduler):
    """Remembers scheduled calls; ``runAll`` fires them."""

    def __init__(self):
        self.calls = []

    def schedule(self, callback, job_id, run_at=None):
        self.calls.append((callback, job_id, run_at))

    def runAll(self):
        calls, self.calls = self.calls, []
        return [callback(jobId) for callback, jobId, _ in calls]


class FailingScheduler(Scheduler):
    def schedule(self, callback, job_id, run_at=None):
        raise RuntimeError("cron is down")


def sendEmail(value):
    return "sent"


def makeRegistry():
    registry = HookRegistry(queueable=["send_email", "explode", "refuse"])
    registry.register("send_email", sendEmail)

    @registry.handler("explode")
    def explode(value):
        raise KeyError("boom")

    @registry.handler("refuse")
    def refuse(value):
        return HookError("mailbox full", data={"retry": False})

    return registry


class ManagerFixture(object):
    """Temp sqlite database with a manager wired to a RecordingScheduler."""

    def __init__(self, registry=None, scheduler=None):
        self.tempDir = tempfile.mkdtemp()
        self.repo = SqliteJobRepository(os.path.join(self.tempDir, "jobs.db"))
        self.registry = registry if registry is not None else makeRegistry()
        self.scheduler = scheduler if scheduler is not None else RecordingScheduler()
        self.manager = JobManager(self.repo, self.registry, self.scheduler)

    def close(self):
        self.repo.close()
        shutil.rmtree(self.tempDir, ignore_errors=True)
