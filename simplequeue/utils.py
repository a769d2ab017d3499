import datetime
import logging

import chardet
import dateutil.tz

LOG = logging.getLogger(__name__)


def utcNow():
    return datetime.datetime.now(dateutil.tz.tzutc())


def autoDecode(byteArray):
    detected = chardet.detect(byteArray)
    encoding = detected['encoding']
    if detected['confidence'] < 0.5:  # very arbitrary
        encoding = 'utf-8'
    return byteArray.decode(encoding)
