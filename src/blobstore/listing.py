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
Top level module for listing objects in a bucket.
"""

import logging
from typing import Any, Dict, Generator, Iterable, List

from botocore import exceptions as botocore_exceptions

from .core import client
from .utils import common, errors


logger = logging.getLogger(__name__)


def _iter_summaries(
    s3_client: Any,
    bucket: str,
    prefix: str | None = None,
) -> Generator[Dict[str, Any], None, None]:
    """
    Yields the raw object summaries of a bucket, following pagination.
    """
    params: Dict[str, Any] = {'Bucket': bucket}
    if prefix:
        params['Prefix'] = prefix

    paginator = s3_client.get_paginator('list_objects_v2')
    try:
        for page in paginator.paginate(**params):
            yield from page.get('Contents', [])
    except (botocore_exceptions.ClientError, botocore_exceptions.BotoCoreError) as error:
        raise errors.to_backend_error(f'list objects in {bucket}', error) from error


def to_storage_object(summary: Dict[str, Any]) -> client.StorageObject:
    """
    Converts a raw object summary into a :py:class:`client.StorageObject` in local time.
    """
    return client.StorageObject(
        key=summary['Key'],
        size=int(summary.get('Size', 0)),
        last_modified=common.to_local_time(summary['LastModified']),
    )


def sort_objects(objects: Iterable[client.StorageObject]) -> List[client.StorageObject]:
    """
    Returns the objects in the canonical listing order (see
    :py:meth:`client.StorageObject.sort_key`).
    """
    return sorted(objects, key=client.StorageObject.sort_key)


def list_objects(
    s3_client: Any,
    bucket: str,
    prefix: str | None = None,
) -> List[client.StorageObject]:
    """
    Lists all objects of a bucket.

    Every page of the listing is fetched before returning, so the result is complete.

    :param s3_client: The S3 client to use for the listing.
    :param bucket: The bucket to list.
    :param prefix: Only list objects whose keys start with this prefix. (Optional)

    :return: The objects, sorted by key.

    Raises:
        errors.BackendError: If the backend rejects the listing.
    """
    objects = sort_objects(
        to_storage_object(summary)
        for summary in _iter_summaries(s3_client, bucket, prefix)
    )
    logger.debug('Listed %d objects in %s', len(objects), bucket)
    return objects


def object_exists(s3_client: Any, bucket: str, key: str) -> bool:
    """
    Returns whether an object with exactly this key exists.

    Lists the objects under the key as a prefix, so other keys sharing the prefix do not
    count. Stops at the first match.
    """
    return any(
        summary['Key'] == key
        for summary in _iter_summaries(s3_client, bucket, key)
    )
