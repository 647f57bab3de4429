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
Error types raised by the blob storage client.
"""

from botocore import exceptions as botocore_exceptions


class BlobStoreError(Exception):
    """
    Base class for all errors raised by the blob storage client.
    """
    pass


class BackendError(BlobStoreError):
    """
    Raised when the storage backend rejects a request or cannot be reached.

    :ivar str | None code: The backend error code (e.g. ``NoSuchBucket``), when known.
    """

    code: str | None = None

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code


class TransferError(BlobStoreError):
    """
    Raised when a transfer fails locally: an I/O failure, or the wait for the transfer
    was interrupted or cancelled.
    """
    pass


class UsageError(BlobStoreError):
    """
    Raised when the client is used incorrectly.
    """
    pass


def error_code(error: Exception) -> str | None:
    """
    Returns the backend error code of a botocore client error, if any.
    """
    if isinstance(error, botocore_exceptions.ClientError):
        return error.response.get('Error', {}).get('Code')
    return None


def to_backend_error(action: str, error: Exception) -> BackendError:
    """
    Wraps a botocore error in a :py:class:`BackendError`.

    Usage: ``raise to_backend_error('delete bucket foo', error) from error``
    """
    return BackendError(f'Failed to {action}: {error}', code=error_code(error))
