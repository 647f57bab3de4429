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

import argparse
import json

from .. import service
from ..utils import common


def setup_parser(parser: argparse._SubParsersAction):
    """
    Configures parser to show the regions buckets can be created in.

    Args:
        parser: The parser to be configured.
    """
    region_parser = parser.add_parser('region',
        help='Command to show bucket regions.')
    subparsers = region_parser.add_subparsers(dest='command')
    subparsers.required = True

    list_parser = subparsers.add_parser('list',
                                        help='List the regions a bucket can be created in',
                                        epilog='Ex. blobstore region list')
    list_parser.add_argument('--format-type', '-t',
                             dest='format_type',
                             choices=('json', 'text'), default='text',
                             help='Specify the output format type (Default text).')
    list_parser.set_defaults(func=_list_regions)


def _list_regions(storage_service: service.StorageService, args: argparse.Namespace):
    regions = storage_service.list_regions()
    if args.format_type == 'json':
        print(json.dumps({'regions': regions}, indent=common.JSON_INDENT_SIZE))
    else:
        print('\n'.join(regions))
