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
Top level module for storage download operations.
"""

import logging
import os
from typing import Any

from botocore import exceptions as botocore_exceptions

from .core import client, config, progress
from .utils import common, errors


logger = logging.getLogger(__name__)


def _close_quietly(stream: Any, name: str) -> None:
    """
    Closes a stream during cleanup. A close failure is logged instead of raised so it
    cannot mask the outcome of the transfer.
    """
    if stream is None:
        return
    try:
        stream.close()
    except Exception as error:  # pylint: disable=broad-except
        logger.warning('Failed to close %s: %s', name, error)


def download_object(
    s3_client: Any,
    bucket: str,
    key: str,
    destination: str,
    on_progress: progress.ProgressCallback | None = None,
    chunk_size: int = config.DEFAULT_DOWNLOAD_CHUNK_SIZE,
) -> client.TransferSummary:
    """
    Downloads a single object into a local file, overwriting it if present.

    If the backend rejects the request, no local file is created. If the copy fails
    midway, the partially written file is left on disk for the caller to discard.

    :param s3_client: The S3 client to use for the download.
    :param bucket: The bucket of the object.
    :param key: The key of the object.
    :param destination: The local file to write.
    :param on_progress: Called with (bytes_so_far, total_bytes) after every chunk
                        written. (Optional)
    :param chunk_size: The number of bytes copied per chunk.

    :return: The summary of the download.

    Raises:
        errors.BackendError: If the backend rejects the request.
        errors.TransferError: If reading the object or writing the local file fails.
    """
    start_time = common.current_time()

    try:
        response = s3_client.get_object(Bucket=bucket, Key=key)
    except (botocore_exceptions.ClientError, botocore_exceptions.BotoCoreError) as error:
        raise errors.to_backend_error(f'get object {bucket}/{key}', error) from error

    body = response['Body']
    total = response.get('ContentLength')
    tracker = progress.ProgressTracker(total, on_progress)

    logger.debug(
        'Downloading %s/%s to %s (%s)',
        bucket, key, destination,
        common.storage_convert(total) if total is not None else 'unknown size',
    )

    writer: progress.ProgressWriter | None = None
    try:
        destination_dir = os.path.dirname(destination)
        if destination_dir:
            os.makedirs(destination_dir, exist_ok=True)

        writer = progress.ProgressWriter(open(destination, 'wb'), tracker)  # pylint: disable=consider-using-with
        for chunk in body.iter_chunks(chunk_size):
            writer.write(chunk)
        # Flush here so write failures surface instead of being swallowed on close.
        writer.flush()

    except (
        OSError,
        botocore_exceptions.IncompleteReadError,
        botocore_exceptions.ReadTimeoutError,
        botocore_exceptions.ResponseStreamingError,
    ) as error:
        raise errors.TransferError(
            f'Download of {bucket}/{key} to {destination} failed: {error}',
        ) from error

    finally:
        _close_quietly(body, f'object stream of {bucket}/{key}')
        _close_quietly(writer, destination)

    tracker.complete()

    return client.TransferSummary(
        bucket=bucket,
        key=key,
        size=writer.written,
        start_time=start_time,
        end_time=common.current_time(),
    )
