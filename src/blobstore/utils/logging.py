# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0


"""
Logging setup of the command line client.

Library modules only create loggers with ``logging.getLogger(__name__)``; handlers and
levels are installed here, once, by the program that owns the process.
"""

import datetime
import enum
import logging
import os
from typing import List, TextIO
from typing_extensions import Self, assert_never

import pydantic


# Loggers of the AWS client stack. They are very chatty at DEBUG level.
LIBRARY_LOGGERS = ('boto3', 'botocore', 's3transfer', 'urllib3')


class LogLevel(enum.IntEnum):
    """
    Log levels accepted on the command line.
    """
    CRITICAL = logging.CRITICAL
    ERROR = logging.ERROR
    WARNING = logging.WARNING
    INFO = logging.INFO
    DEBUG = logging.DEBUG

    # Aliases
    FATAL = CRITICAL
    WARN = WARNING

    @classmethod
    def parse(cls, value: str | int) -> Self:
        """
        Parses a level from its name (any case) or its numeric value.
        """
        match value:
            case int():
                return cls(value)
            case str() as text if text.strip().isdigit():
                return cls(int(text))
            case str() as text:
                level = cls.__members__.get(text.strip().upper())
                if level is None:
                    choices = ', '.join(cls.__members__)
                    raise ValueError(f'Unknown log level "{text}", expected one of: {choices}')
                return level
            case _ as unreachable:
                assert_never(unreachable)


class LogSettings(pydantic.BaseModel):
    """
    Where and how verbosely the command line client logs.
    """
    level: LogLevel = pydantic.Field(
        default=LogLevel.WARNING,
        description='The level of messages logged by blobstore.')
    library_level: LogLevel = pydantic.Field(
        default=LogLevel.WARNING,
        description='The level of messages logged by the AWS client libraries.')
    log_dir: str | None = pydantic.Field(
        default=None,
        description='A directory to also write a log file to.')
    file_name: str = pydantic.Field(
        default='blobstore',
        min_length=1,
        description='The suffix of the log file name.')

    @pydantic.field_validator('level', 'library_level', mode='before')
    @classmethod
    def _parse_level(cls, value) -> LogLevel:
        return LogLevel.parse(value)


class TimestampFormatter(logging.Formatter):
    """
    Formats record times as local ISO 8601 timestamps with milliseconds.
    """

    def formatTime(self, record, datefmt=None):
        # pylint: disable=invalid-name,unused-argument
        created = datetime.datetime.fromtimestamp(record.created).astimezone()
        return created.isoformat(timespec='milliseconds')


def _log_file_path(settings: LogSettings) -> str:
    assert settings.log_dir is not None
    # Colons are not allowed in Windows file names.
    started = datetime.datetime.now().strftime('%Y-%m-%d_%H-%M-%S')
    return os.path.join(settings.log_dir, f'{started}_{os.getpid()}_{settings.file_name}.txt')


def configure_logging(settings: LogSettings, stream: TextIO | None = None) -> List[logging.Handler]:
    """
    Sends the records of the whole process to stderr (or ``stream``) and, if
    ``settings.log_dir`` is set, to a new log file in that directory.

    :return: The handlers added to the root logger.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(stream)]
    if settings.log_dir is not None:
        os.makedirs(settings.log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(_log_file_path(settings), encoding='utf-8'))

    formatter = TimestampFormatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s')
    root_logger = logging.getLogger()
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(settings.level)

    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(settings.library_level)

    return handlers
