import configparser
import os

RC_FILE_HELP = """\
Sample rcfile:
    [queue]
    database = jobs.db  # default=jobs.db, relative to <state-dir>/db/
    schedule delay = 0  # seconds between create and execution, default=0
    [hooks]
    queueable = send_email, build_report
"""


def _getConfig(cfgParser, section, option, defaultValue=None):
    if not cfgParser.has_section(section):
        return defaultValue
    if not cfgParser.has_option(section, option):
        return defaultValue
    return cfgParser.get(section, option)


def _getListConfig(cfgParser, section, option):
    val = _getConfig(cfgParser, section, option, "")
    return [item.strip() for item in val.replace("\n", ",").split(",")
            if item.strip()]


def _getDelayConfig(cfgParser, section, option, default):
    val = _getConfig(cfgParser, section, option, None)
    if val is None:
        return default
    try:
        delay = float(val)
    except ValueError:
        delay = -1
    if delay < 0:
        raise ConfigError(
            "RC file has invalid \"{section}.{option}\" setting {optionVal}.  "
            "Expected a number of seconds >= 0".format(
                section=section,
                option=option,
                optionVal=val))
    return delay


class ConfigError(Exception):
    pass


class Config(object):
    validConfig = {
        'queue': {'database', 'schedule delay'},
        'hooks': {'queueable'},
    }

    def _validateConfigParser(self, cfgParser):
        cfgSections = set(cfgParser.sections())
        unknownSections = cfgSections - set(self.validConfig.keys())
        if unknownSections:
            raise ConfigError(
                "RC file has unknown configuration sections: {}".format(
                    ", ".join(sorted(unknownSections))))
        for section in cfgSections:
            cfgValues = set(cfgParser.options(section))
            unknownOptions = cfgValues - self.validConfig[section]
            if unknownOptions:
                raise ConfigError(
                    "RC file has unknown configuration options in "
                    "section \"{}\": {}".format(
                        section, ", ".join(sorted(unknownOptions))))

    def __init__(self, options):
        stateDir = options.stateDir
        self.options = options
        self._dbDir = os.path.expanduser(stateDir) + "/db/"
        self._logDir = os.path.expanduser(stateDir) + "/log/"

        rcFile = os.path.expanduser(options.rcFile)
        cfgParser = configparser.RawConfigParser()
        cfgParser.read(rcFile)
        self._validateConfigParser(cfgParser)

        self._database = _getConfig(cfgParser, "queue", "database", "jobs.db")
        self._scheduleDelay = _getDelayConfig(
            cfgParser, "queue", "schedule delay", 0.0)
        self._queueable = _getListConfig(cfgParser, "hooks", "queueable")

    @staticmethod
    def checkDir(dirName):
        if not os.access(dirName, os.W_OK | os.X_OK | os.R_OK):
            os.makedirs(dirName)
        return dirName

    @property
    def dbDir(self):
        return self.checkDir(self._dbDir)

    @property
    def logDir(self):
        return self.checkDir(self._logDir)

    @property
    def dbPath(self):
        if os.path.isabs(os.path.expanduser(self._database)):
            return os.path.expanduser(self._database)
        return os.path.join(self.dbDir, self._database)

    @property
    def scheduleDelay(self):
        return self._scheduleDelay

    @property
    def queueable(self):
        return list(self._queueable)
