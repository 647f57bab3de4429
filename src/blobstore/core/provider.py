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
Module for constructing the boto3 S3 client and the transfer manager from settings.
"""

import dataclasses
import logging
from typing import Any, Dict, List

import boto3
from botocore import config as botocore_config
from s3transfer import manager

from . import config


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ClientFactory:
    """
    Creates the S3 client and transfer manager used by a storage service.
    """

    settings: config.StorageSettings = dataclasses.field(
        default_factory=config.StorageSettings,
    )

    def create_session(self) -> boto3.session.Session:
        """
        Returns a boto3 session. Credentials not given in settings are left to the boto3
        credential chain.
        """
        session_kwargs: Dict[str, Any] = {}
        if self.settings.profile:
            session_kwargs['profile_name'] = self.settings.profile
        if self.settings.access_key_id:
            session_kwargs['aws_access_key_id'] = self.settings.access_key_id
        if self.settings.secret_access_key:
            session_kwargs['aws_secret_access_key'] = \
                self.settings.secret_access_key.get_secret_value()
        if self.settings.session_token:
            session_kwargs['aws_session_token'] = self.settings.session_token.get_secret_value()
        if self.settings.region:
            session_kwargs['region_name'] = self.settings.region
        return boto3.session.Session(**session_kwargs)

    def create_client(self, session: boto3.session.Session | None = None) -> Any:
        """
        Returns an S3 client. boto3 clients are thread-safe and can be shared by workers.
        """
        session = session or self.create_session()
        client_config = botocore_config.Config(
            max_pool_connections=self.settings.max_pool_connections,
            s3={'addressing_style': self.settings.addressing_style},
        )
        logger.debug(
            'Creating S3 client (endpoint=%s, region=%s)',
            self.settings.endpoint_url or 'default', self.settings.region or 'default',
        )
        return session.client(
            's3',
            endpoint_url=self.settings.endpoint_url,
            config=client_config,
        )

    def create_transfer_manager(self, s3_client: Any) -> manager.TransferManager:
        """
        Returns a transfer manager whose worker pool moves the bytes of uploads. It decides
        between single and multipart uploads based on the configured threshold.
        """
        transfer_config = manager.TransferConfig(
            multipart_threshold=self.settings.multipart_threshold,
            multipart_chunksize=self.settings.multipart_chunksize,
            max_request_concurrency=self.settings.max_concurrency,
        )
        return manager.TransferManager(s3_client, transfer_config)

    def available_regions(self) -> List[str]:
        """
        Returns the S3 regions known to the client library, sorted by name. Uses bundled
        endpoint data only, no request is sent.
        """
        return sorted(boto3.session.Session().get_available_regions('s3'))
