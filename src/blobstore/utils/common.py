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

import datetime
import os
import re
from typing import List

import pytz
import texttable  # type: ignore


JSON_INDENT_SIZE = 2

# 'ms' must be tried before 'm' and 's'.
_DURATION_PATTERN = re.compile(r'(\d+)(ms|d|h|m|s)')
_DURATION_UNITS = {
    'd': 'days',
    'h': 'hours',
    'm': 'minutes',
    's': 'seconds',
    'ms': 'milliseconds',
}

_SIZE_UNITS = ('KiB', 'MiB', 'GiB', 'TiB')


def current_time() -> datetime.datetime:
    """ Gets the current timezone aware UTC timestamp. """
    return datetime.datetime.now(pytz.UTC)


def to_local_time(instant: datetime.datetime) -> datetime.datetime:
    """
    Projects an absolute instant onto the local time zone and drops the zone.

    Naive inputs are interpreted as UTC, which is how S3 reports timestamps.
    """
    if instant.tzinfo is None:
        instant = pytz.UTC.localize(instant)
    return instant.astimezone().replace(tzinfo=None)


def seconds_until(moment: datetime.datetime) -> float:
    """
    Returns the number of seconds from now until the given moment.

    Naive moments are interpreted in the local time zone.
    """
    if moment.tzinfo is None:
        return (moment - datetime.datetime.now()).total_seconds()
    return (moment - current_time()).total_seconds()


def to_timedelta(duration: str) -> datetime.timedelta:
    """
    Parses a duration such as ``30m`` or ``7d``. Supported units are d, h, m, s and ms.

    Raises:
        ValueError: If the duration is malformed.
    """
    match = _DURATION_PATTERN.fullmatch(duration.strip())
    if match is None:
        raise ValueError(
            f'Cannot recognize duration: {duration}. Only support xd, xh, xm, xs, xms')
    value, unit = match.groups()
    return datetime.timedelta(**{_DURATION_UNITS[unit]: int(value)})


def file_extension(path: str) -> str:
    """
    Returns the extension of the base name of a path, without the dot and with its case kept.

    Returns an empty string if the name has no extension. Dot-files (e.g. ``.bashrc``)
    have no extension.
    """
    return os.path.splitext(os.path.basename(path))[1][1:]


def storage_convert(b: int) -> str:
    """
    Formats a byte count for humans, e.g. ``1536`` as ``1.5 KiB``.

    Raises:
        ValueError: If the byte count is negative.
    """
    if b < 0:
        raise ValueError(f'Byte count cannot be negative: {b}')
    if b < 1024:
        return f'{b} B'

    value = float(b)
    for unit in _SIZE_UNITS:
        value /= 1024
        if value < 1024 or unit == _SIZE_UNITS[-1]:
            break
    return f'{value:.1f} {unit}'


def blobstore_table(header: List[str]) -> texttable.Texttable:
    """
    Returns a borderless table with an underlined, left aligned header, used by every
    text output of the CLI.
    """
    table = texttable.Texttable(max_width=0)
    table.set_deco(texttable.Texttable.HEADER)
    table.set_chars(['', '', '', '='])
    table.header(header)
    table.set_header_align(['l'] * len(header))
    return table
