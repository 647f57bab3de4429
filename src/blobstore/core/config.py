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
Configuration of the storage client.
"""

from typing import Any, Dict, Literal, Tuple, Type

import pydantic
import pydantic_settings


KiB = 1024
MiB = 1024 * KiB

# S3 rejects multipart parts smaller than 5 MiB (except the last one).
MIN_MULTIPART_CHUNKSIZE = 5 * MiB

DEFAULT_MULTIPART_THRESHOLD = 8 * MiB
DEFAULT_MULTIPART_CHUNKSIZE = 8 * MiB
DEFAULT_MAX_CONCURRENCY = 10
DEFAULT_MAX_POOL_CONNECTIONS = 20
DEFAULT_DOWNLOAD_CHUNK_SIZE = 1 * MiB


class _InitSettingsWithoutNone(pydantic_settings.PydanticBaseSettingsSource):
    """
    Treats explicit None init values as "unset" so environment variables can apply.
    """

    def __init__(
        self,
        settings_cls: Type[pydantic_settings.BaseSettings],
        init_settings: pydantic_settings.PydanticBaseSettingsSource,
    ):
        super().__init__(settings_cls)
        self._init_settings = init_settings

    def get_field_value(self, field, field_name) -> Tuple[Any, str, bool]:
        # Unused, __call__ is overridden.
        return None, field_name, False

    def __call__(self) -> Dict[str, Any]:
        return {k: v for k, v in self._init_settings().items() if v is not None}


class StorageSettings(pydantic_settings.BaseSettings):
    """
    Parameters of the storage client and its transfer worker pool.

    Allows for environment variable overrides of the parameters, e.g.
    ``BLOBSTORE_ENDPOINT_URL=http://localhost:9000``.
    """

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix='BLOBSTORE_',
        frozen=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            _InitSettingsWithoutNone(settings_cls, init_settings),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    endpoint_url: str | None = pydantic.Field(
        default=None,
        description='A custom endpoint of an S3 compatible backend (e.g. MinIO, LocalStack).',
    )

    region: str | None = pydantic.Field(
        default=None,
        description='The region of the client. Defaults to the boto3 configuration.',
    )

    profile: str | None = pydantic.Field(
        default=None,
        description='The boto3 profile to take credentials from.',
    )

    access_key_id: str | None = pydantic.Field(
        default=None,
        description='An explicit access key id. Defaults to the boto3 credential chain.',
    )

    secret_access_key: pydantic.SecretStr | None = pydantic.Field(
        default=None,
        description='An explicit secret access key. Defaults to the boto3 credential chain.',
    )

    session_token: pydantic.SecretStr | None = pydantic.Field(
        default=None,
        description='An explicit session token for temporary credentials.',
    )

    addressing_style: Literal['auto', 'path', 'virtual'] = pydantic.Field(
        default='auto',
        description='The S3 bucket addressing style.',
    )

    max_pool_connections: int = pydantic.Field(
        default=DEFAULT_MAX_POOL_CONNECTIONS,
        ge=1,
        description='The maximum number of connections kept in the client connection pool.',
    )

    multipart_threshold: int = pydantic.Field(
        default=DEFAULT_MULTIPART_THRESHOLD,
        ge=1,
        description='Files larger than this many bytes are uploaded in multiple parts.',
    )

    multipart_chunksize: int = pydantic.Field(
        default=DEFAULT_MULTIPART_CHUNKSIZE,
        ge=MIN_MULTIPART_CHUNKSIZE,
        description='The size in bytes of a single part of a multipart upload.',
    )

    max_concurrency: int = pydantic.Field(
        default=DEFAULT_MAX_CONCURRENCY,
        ge=1,
        description='The number of worker threads that move bytes for uploads.',
    )

    download_chunk_size: int = pydantic.Field(
        default=DEFAULT_DOWNLOAD_CHUNK_SIZE,
        ge=1,
        description='The number of bytes copied per chunk when downloading.',
    )

    @pydantic.model_validator(mode='after')
    def _validate_pool_size(self) -> 'StorageSettings':
        if self.max_pool_connections < self.max_concurrency:
            raise ValueError(
                'max_pool_connections must be at least max_concurrency, '
                'otherwise transfer workers wait for connections')
        return self
