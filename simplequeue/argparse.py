import os


def addArgumentParserBaseFlags(parser, logfileName):
    '''
    Adds the flags shared by every simple-queue command.
    Provides ALL flags required by the Config class.
    '''
    parser.add_argument(
        "-d",
        "--state-dir",
        dest='stateDir',
        metavar="DIR",
        help="Specify state directory (default='%(default)s')",
        default=os.getenv('SIMPLEQUEUE_STATE_DIR', "~/.local/share/simpleQueue"))
    parser.add_argument("--rc-file", dest="rcFile",
                        help="Specify path to rc-file (default=\"%(default)s\")",
                        default="~/.config/simplequeuerc")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="enable debug output to <state-dir>/log/%s.log" % logfileName)
