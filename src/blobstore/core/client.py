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
Value types returned by the storage client.

All of them are read projections of remote state: they are built fresh on every call and
never cached.
"""

import datetime
from typing import Tuple

import pydantic


@pydantic.dataclasses.dataclass(frozen=True)
class Bucket:
    """
    A bucket of the storage backend.

    :param str name: The backend-unique name of the bucket.
    """

    name: str = pydantic.Field(
        ...,
        min_length=1,
        description='The backend-unique name of the bucket.',
    )


@pydantic.dataclasses.dataclass(frozen=True)
class StorageObject:
    """
    An object stored in a bucket.

    :param str key: The key of the object.
    :param int size: The size in bytes of the object.
    :param datetime last_modified: The last modified time of the object, in local time
                                   without time zone information.
    """

    key: str = pydantic.Field(
        ...,
        description='The key of the object.',
    )

    size: int = pydantic.Field(
        ...,
        ge=0,
        description='The size in bytes of the object.',
    )

    last_modified: datetime.datetime = pydantic.Field(
        ...,
        description='The last modified time of the object in local time.',
    )

    def sort_key(self) -> Tuple[str, datetime.datetime, int]:
        """
        Returns the key of the canonical listing order: by key, then last modified, then size.
        """
        return (self.key, self.last_modified, self.size)


@pydantic.dataclasses.dataclass(frozen=True)
class TransferSummary:
    """
    Summary of a completed upload or download.

    :ivar str bucket: The bucket of the transferred object.
    :ivar str key: The key of the transferred object.
    :ivar int size: The number of bytes transferred.
    :ivar datetime.datetime start_time: The start time of the transfer.
    :ivar datetime.datetime end_time: The end time of the transfer.
    """

    bucket: str = pydantic.Field(..., description='The bucket of the transferred object.')
    key: str = pydantic.Field(..., description='The key of the transferred object.')
    size: int = pydantic.Field(..., ge=0, description='The number of bytes transferred.')
    start_time: datetime.datetime = pydantic.Field(
        ...,
        description='The start time of the transfer.',
    )
    end_time: datetime.datetime = pydantic.Field(
        ...,
        description='The end time of the transfer.',
    )

    @property
    def elapsed_time(self) -> datetime.timedelta:
        """ Returns the elapsed time of the transfer. """
        return self.end_time - self.start_time
