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
The blobstore package is a client for S3 compatible object storage.

It provides bucket lifecycle management, object listing, uploads and downloads with
progress reporting, presigned URLs, and cleanup of abandoned multipart uploads.
"""

from .content_types import VIDEO_CONTENT_TYPES, resolve_content_type
from .core.client import Bucket, StorageObject, TransferSummary
from .core.config import StorageSettings
from .core.progress import ProgressCallback
from .core.provider import ClientFactory
from .service import StorageService
from .utils.errors import BackendError, BlobStoreError, TransferError, UsageError
