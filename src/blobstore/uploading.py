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
Top level module for storage upload operations.
"""

import dataclasses
import logging
import os
from typing import Any, Dict

from botocore import exceptions as botocore_exceptions
from s3transfer import exceptions as s3transfer_exceptions
from s3transfer import manager

from . import content_types
from .core import client, progress
from .utils import common, errors


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, kw_only=True, slots=True)
class UploadRequest:
    """
    A single file to upload.
    """
    bucket: str
    key: str
    source: str
    size: int
    content_type: str | None = dataclasses.field(default=None)

    @classmethod
    def from_file(cls, bucket: str, key: str, source: str) -> 'UploadRequest':
        """
        Builds the request for a local file, resolving its content type.

        Raises:
            errors.TransferError: If the file cannot be read.
        """
        try:
            size = os.path.getsize(source)
        except OSError as error:
            raise errors.TransferError(f'Cannot read upload source {source}: {error}') from error

        return cls(
            bucket=bucket,
            key=key,
            source=source,
            size=size,
            content_type=content_types.resolve_content_type(source),
        )

    def extra_args(self) -> Dict[str, Any]:
        """
        Returns the object metadata to send with the upload.
        """
        if self.content_type is None:
            return {}
        return {'ContentType': self.content_type}


def upload_object(
    transfer_manager: manager.TransferManager,
    request: UploadRequest,
    on_progress: progress.ProgressCallback | None = None,
) -> client.TransferSummary:
    """
    Uploads a single file and blocks until the upload completes or fails.

    The transfer manager splits large files into a multipart upload on its worker pool.
    ``on_progress`` is called on those worker threads.

    :param transfer_manager: The transfer manager that moves the bytes.
    :param request: The file to upload.
    :param on_progress: Called with (bytes_so_far, total_bytes) as bytes are sent. (Optional)

    :return: The summary of the upload.

    Raises:
        errors.BackendError: If the backend rejects the upload.
        errors.TransferError: If the upload is interrupted, cancelled, or fails locally.
    """
    start_time = common.current_time()
    tracker = progress.ProgressTracker(request.size, on_progress)

    logger.debug(
        'Uploading %s to %s/%s (%s, content type %s)',
        request.source, request.bucket, request.key,
        common.storage_convert(request.size), request.content_type or 'default',
    )

    future = transfer_manager.upload(
        request.source,
        request.bucket,
        request.key,
        extra_args=request.extra_args(),
        subscribers=[progress.UploadProgressSubscriber(tracker)],
    )

    try:
        future.result()

    except KeyboardInterrupt as error:
        # TransferFuture.result() cancels the transfer before re-raising.
        raise errors.TransferError(
            f'Upload of {request.source} to {request.bucket}/{request.key} was interrupted',
        ) from error

    except s3transfer_exceptions.CancelledError as error:
        raise errors.TransferError(
            f'Upload of {request.source} to {request.bucket}/{request.key} was cancelled: '
            f'{error}',
        ) from error

    except (botocore_exceptions.ClientError, botocore_exceptions.BotoCoreError) as error:
        raise errors.to_backend_error(
            f'upload {request.source} to {request.bucket}/{request.key}', error,
        ) from error

    except OSError as error:
        raise errors.TransferError(
            f'Upload of {request.source} to {request.bucket}/{request.key} failed: {error}',
        ) from error

    tracker.complete()

    return client.TransferSummary(
        bucket=request.bucket,
        key=request.key,
        size=request.size,
        start_time=start_time,
        end_time=common.current_time(),
    )
