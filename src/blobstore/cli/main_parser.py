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
Main parser for the CLI.
"""

import argparse

from . import bucket, objects, region
from ..utils import logging as logging_utils


PARSERS = (
    region.setup_parser,
    bucket.setup_parser,
    objects.setup_parser,
)


def create_cli_parser() -> argparse.ArgumentParser:
    """
    Create the CLI argument parser for the blob storage client.
    """
    parser = argparse.ArgumentParser(
        prog='blobstore',
        description='blobstore manages buckets and objects of an S3 compatible object storage '
                    'backend: it lists buckets and objects, uploads and downloads files, '
                    'creates presigned URLs, and cleans up abandoned multipart uploads. '
                    'Connection settings are read from BLOBSTORE_* environment variables '
                    'and the boto3 configuration.',
    )
    parser.add_argument('--log-level',
                        type=logging_utils.LogLevel.parse,
                        default=logging_utils.LogLevel.WARNING)
    parser.add_argument('--log-dir',
                        help='A directory to also write log files to.')
    parser.add_argument('--endpoint-url',
                        help='A custom endpoint of an S3 compatible backend. '
                             'Overrides BLOBSTORE_ENDPOINT_URL.')

    subparsers = parser.add_subparsers(dest='module')
    for setup in PARSERS:
        setup(subparsers)

    return parser
