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
Unit tests for the storage settings and client factory.
"""

import os
import unittest
from unittest import mock

import pydantic

from blobstore.core import config, provider


class TestStorageSettings(unittest.TestCase):
    """
    Tests the storage settings.
    """

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        settings = config.StorageSettings()

        self.assertIsNone(settings.endpoint_url)
        self.assertEqual(settings.addressing_style, 'auto')
        self.assertEqual(settings.multipart_threshold, config.DEFAULT_MULTIPART_THRESHOLD)
        self.assertEqual(settings.multipart_chunksize, config.DEFAULT_MULTIPART_CHUNKSIZE)
        self.assertEqual(settings.max_concurrency, config.DEFAULT_MAX_CONCURRENCY)

    @mock.patch.dict(os.environ, {
        'BLOBSTORE_ENDPOINT_URL': 'http://localhost:9000',
        'BLOBSTORE_MAX_CONCURRENCY': '4',
    }, clear=True)
    def test_environment_overrides(self):
        settings = config.StorageSettings()

        self.assertEqual(settings.endpoint_url, 'http://localhost:9000')
        self.assertEqual(settings.max_concurrency, 4)

    @mock.patch.dict(os.environ, {'BLOBSTORE_ENDPOINT_URL': 'http://localhost:9000'}, clear=True)
    def test_explicit_none_does_not_hide_environment(self):
        """
        Test that passing None explicitly lets the environment variable apply.
        """
        settings = config.StorageSettings(endpoint_url=None)

        self.assertEqual(settings.endpoint_url, 'http://localhost:9000')

    @mock.patch.dict(os.environ, {'BLOBSTORE_ENDPOINT_URL': 'http://localhost:9000'}, clear=True)
    def test_explicit_value_wins_over_environment(self):
        settings = config.StorageSettings(endpoint_url='http://minio:9000')

        self.assertEqual(settings.endpoint_url, 'http://minio:9000')

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_chunksize_below_s3_minimum_is_rejected(self):
        with self.assertRaises(pydantic.ValidationError):
            config.StorageSettings(multipart_chunksize=config.MiB)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_pool_smaller_than_concurrency_is_rejected(self):
        with self.assertRaises(pydantic.ValidationError):
            config.StorageSettings(max_concurrency=30, max_pool_connections=10)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_invalid_addressing_style_is_rejected(self):
        with self.assertRaises(pydantic.ValidationError):
            config.StorageSettings(addressing_style='sideways')


class TestClientFactory(unittest.TestCase):
    """
    Tests the client factory.
    """

    @mock.patch.dict(os.environ, {}, clear=True)
    @mock.patch('blobstore.core.provider.boto3.session.Session')
    def test_create_client_passes_settings(self, mock_session_class):
        # Arrange
        mock_session = mock.Mock()
        mock_session_class.return_value = mock_session
        factory = provider.ClientFactory(config.StorageSettings(
            endpoint_url='http://localhost:9000',
            region='eu-west-1',
            access_key_id='test-access-key-id',
            secret_access_key='test-access-key',
            addressing_style='path',
        ))

        # Act
        factory.create_client()

        # Assert
        mock_session_class.assert_called_once_with(
            aws_access_key_id='test-access-key-id',
            aws_secret_access_key='test-access-key',
            region_name='eu-west-1',
        )
        _, kwargs = mock_session.client.call_args
        self.assertEqual(kwargs['endpoint_url'], 'http://localhost:9000')
        self.assertEqual(kwargs['config'].s3, {'addressing_style': 'path'})
        self.assertEqual(kwargs['config'].max_pool_connections,
                         config.DEFAULT_MAX_POOL_CONNECTIONS)

    @mock.patch.dict(os.environ, {}, clear=True)
    @mock.patch('blobstore.core.provider.manager.TransferManager')
    def test_create_transfer_manager_uses_multipart_settings(self, mock_manager_class):
        factory = provider.ClientFactory(config.StorageSettings(
            multipart_threshold=16 * config.MiB,
            multipart_chunksize=6 * config.MiB,
            max_concurrency=3,
        ))
        s3_client = mock.Mock()

        factory.create_transfer_manager(s3_client)

        args, _ = mock_manager_class.call_args
        self.assertIs(args[0], s3_client)
        transfer_config = args[1]
        self.assertEqual(transfer_config.multipart_threshold, 16 * config.MiB)
        self.assertEqual(transfer_config.multipart_chunksize, 6 * config.MiB)
        self.assertEqual(transfer_config.max_request_concurrency, 3)

    @mock.patch.dict(os.environ, {}, clear=True)
    @mock.patch('blobstore.core.provider.boto3.session.Session')
    def test_available_regions_are_sorted(self, mock_session_class):
        mock_session_class.return_value.get_available_regions.return_value = [
            'us-west-2', 'eu-west-1', 'ap-south-1',
        ]

        regions = provider.ClientFactory(config.StorageSettings()).available_regions()

        self.assertEqual(regions, ['ap-south-1', 'eu-west-1', 'us-west-2'])


if __name__ == '__main__':
    unittest.main()
