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
The storage service: a uniform facade over an S3 compatible object storage backend.
"""

import datetime
import logging
import math
import threading
from typing import Any, Dict, List

from botocore import exceptions as botocore_exceptions
from s3transfer import manager

from . import downloading, listing, uploading
from .core import client, config, progress, provider
from .utils import common, errors


logger = logging.getLogger(__name__)

# The region S3 uses when no location constraint is sent with a create bucket request.
DEFAULT_BUCKET_REGION = 'us-east-1'

_BOTO_ERRORS = (botocore_exceptions.ClientError, botocore_exceptions.BotoCoreError)


class StorageService:
    """
    Client side orchestration of bucket lifecycle, listing, transfers, presigned URLs
    and multipart upload cleanup.

    The service owns a transfer worker pool and the client connections. Release them with
    :py:meth:`shutdown`, or use the service as a context manager:

    .. code-block:: python

        with StorageService() as service:
            service.upload('bucket', 'videos/intro.mp4', '/tmp/intro.mp4')
            for obj in service.list_objects('bucket'):
                print(obj.key, obj.size, obj.last_modified)
    """

    def __init__(
        self,
        settings: config.StorageSettings | None = None,
        *,
        client_factory: provider.ClientFactory | None = None,
        s3_client: Any | None = None,
        transfer_manager: manager.TransferManager | None = None,
    ):
        """
        :param settings: The settings of the service. Ignored if ``client_factory`` is given.
        :param client_factory: Creates the S3 client and transfer manager. (Optional)
        :param s3_client: An existing S3 client to use. (Optional)
        :param transfer_manager: An existing transfer manager to use. (Optional)
        """
        self._client_factory = client_factory or provider.ClientFactory(
            settings or config.StorageSettings(),
        )
        self._s3_client = s3_client or self._client_factory.create_client()
        self._transfer_manager = (
            transfer_manager
            or self._client_factory.create_transfer_manager(self._s3_client)
        )
        self._shutdown_lock = threading.Lock()
        self._is_shutdown = False

    def __enter__(self) -> 'StorageService':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.shutdown()

    @property
    def settings(self) -> config.StorageSettings:
        return self._client_factory.settings

    def _check_open(self) -> None:
        if self._is_shutdown:
            raise errors.UsageError('The storage service has been shut down')

    ###################
    #     Buckets     #
    ###################

    def list_regions(self) -> List[str]:
        """
        Returns the names of the regions a bucket can be created in.
        """
        return self._client_factory.available_regions()

    def list_buckets(self) -> List[client.Bucket]:
        """
        Returns the buckets owned by the configured credentials, in backend order.
        """
        self._check_open()
        try:
            response = self._s3_client.list_buckets()
        except _BOTO_ERRORS as error:
            raise errors.to_backend_error('list buckets', error) from error
        return [client.Bucket(name=bucket['Name']) for bucket in response.get('Buckets', [])]

    def bucket_exists(self, bucket: str) -> bool:
        """
        Asks the backend whether a bucket exists.

        A bucket owned by someone else exists: the backend answers 403 for it.
        """
        self._check_open()
        try:
            self._s3_client.head_bucket(Bucket=bucket)
        except botocore_exceptions.ClientError as error:
            code = errors.error_code(error)
            if code in ('404', 'NoSuchBucket', 'NotFound'):
                return False
            if code in ('403', 'AccessDenied', 'Forbidden'):
                return True
            raise errors.to_backend_error(f'check bucket {bucket}', error) from error
        except botocore_exceptions.BotoCoreError as error:
            raise errors.to_backend_error(f'check bucket {bucket}', error) from error
        return True

    def create_bucket(self, bucket: str, region: str | None = None) -> None:
        """
        Creates a bucket.

        :param bucket: The name of the bucket.
        :param region: The region of the bucket. If None, the backend chooses.

        Raises:
            errors.BackendError: If the name is taken or malformed, or the region is invalid.
        """
        self._check_open()
        params: Dict[str, Any] = {'Bucket': bucket}
        if region is not None and region != DEFAULT_BUCKET_REGION:
            params['CreateBucketConfiguration'] = {'LocationConstraint': region}
        try:
            self._s3_client.create_bucket(**params)
        except _BOTO_ERRORS as error:
            raise errors.to_backend_error(f'create bucket {bucket}', error) from error
        logger.info('Created bucket %s (region %s)', bucket, region or 'default')

    def delete_bucket(self, bucket: str) -> None:
        """
        Deletes an empty bucket.

        Raises:
            errors.BackendError: If the bucket is missing or not empty.
        """
        self._check_open()
        try:
            self._s3_client.delete_bucket(Bucket=bucket)
        except _BOTO_ERRORS as error:
            raise errors.to_backend_error(f'delete bucket {bucket}', error) from error
        logger.info('Deleted bucket %s', bucket)

    ###################
    #     Objects     #
    ###################

    def list_objects(self, bucket: str, prefix: str | None = None) -> List[client.StorageObject]:
        """
        Returns every object of a bucket sorted by key. See :py:func:`listing.list_objects`.
        """
        self._check_open()
        return listing.list_objects(self._s3_client, bucket, prefix)

    def object_exists(self, bucket: str, key: str) -> bool:
        """
        Returns whether an object with exactly this key exists. This costs a listing call.
        """
        self._check_open()
        return listing.object_exists(self._s3_client, bucket, key)

    def delete_object(self, bucket: str, key: str) -> None:
        self._check_open()
        try:
            self._s3_client.delete_object(Bucket=bucket, Key=key)
        except _BOTO_ERRORS as error:
            raise errors.to_backend_error(f'delete object {bucket}/{key}', error) from error
        logger.debug('Deleted object %s/%s', bucket, key)

    def presigned_url(self, bucket: str, key: str, expires: datetime.datetime) -> str:
        """
        Returns a signed URL granting read access to an object until ``expires``.

        Signing is local, no request is sent to the backend.

        :param expires: The expiry time. Naive values are in local time.

        Raises:
            errors.UsageError: If the expiry time is not in the future.
        """
        self._check_open()
        seconds = math.ceil(common.seconds_until(expires))
        if seconds <= 0:
            raise errors.UsageError(f'Presigned URL expiry {expires} is not in the future')
        try:
            return self._s3_client.generate_presigned_url(
                'get_object',
                Params={'Bucket': bucket, 'Key': key},
                ExpiresIn=seconds,
            )
        except _BOTO_ERRORS as error:
            raise errors.to_backend_error(f'sign URL for {bucket}/{key}', error) from error

    #####################
    #     Transfers     #
    #####################

    def upload(
        self,
        bucket: str,
        key: str,
        source: str,
        on_progress: progress.ProgressCallback | None = None,
    ) -> client.TransferSummary:
        """
        Uploads a local file. See :py:func:`uploading.upload_object`.
        """
        self._check_open()
        request = uploading.UploadRequest.from_file(bucket, key, source)
        return uploading.upload_object(self._transfer_manager, request, on_progress)

    def download(
        self,
        bucket: str,
        key: str,
        destination: str,
        on_progress: progress.ProgressCallback | None = None,
    ) -> client.TransferSummary:
        """
        Downloads an object into a local file. See :py:func:`downloading.download_object`.
        """
        self._check_open()
        return downloading.download_object(
            self._s3_client,
            bucket,
            key,
            destination,
            on_progress,
            chunk_size=self.settings.download_chunk_size,
        )

    def abort_abandoned_multipart_uploads(self, bucket: str) -> int:
        """
        Aborts every multipart upload of a bucket that was initiated before now, e.g. by
        an upload that crashed. Safe to call repeatedly.

        :return: The number of aborted uploads.
        """
        self._check_open()
        cutoff = common.current_time()
        aborted = 0

        paginator = self._s3_client.get_paginator('list_multipart_uploads')
        try:
            for page in paginator.paginate(Bucket=bucket):
                for upload in page.get('Uploads', []):
                    if upload['Initiated'] >= cutoff:
                        continue
                    if self._abort_multipart_upload(bucket, upload['Key'], upload['UploadId']):
                        aborted += 1
        except _BOTO_ERRORS as error:
            raise errors.to_backend_error(
                f'abort multipart uploads in {bucket}', error,
            ) from error

        if aborted:
            logger.info('Aborted %d abandoned multipart uploads in %s', aborted, bucket)
        return aborted

    def _abort_multipart_upload(self, bucket: str, key: str, upload_id: str) -> bool:
        try:
            self._s3_client.abort_multipart_upload(Bucket=bucket, Key=key, UploadId=upload_id)
        except botocore_exceptions.ClientError as error:
            if errors.error_code(error) == 'NoSuchUpload':
                logger.debug('Multipart upload %s of %s/%s is already gone',
                             upload_id, bucket, key)
                return False
            raise
        return True

    def shutdown(self) -> None:
        """
        Releases the transfer worker pool and the client connections.

        In-flight transfers are cancelled rather than awaited; their callers fail with
        :py:class:`errors.TransferError`. Calling this more than once has no effect.
        """
        with self._shutdown_lock:
            if self._is_shutdown:
                return
            self._is_shutdown = True

        logger.info('Shutting down storage service')
        try:
            self._transfer_manager.shutdown(cancel=True, cancel_msg='Storage service shut down')
        finally:
            self._s3_client.close()
