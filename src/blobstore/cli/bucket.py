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
    Configures parser to manage buckets.

    Args:
        parser: The parser to be configured.
    """
    bucket_parser = parser.add_parser('bucket',
        help='Command to manage buckets.')
    subparsers = bucket_parser.add_subparsers(dest='command')
    subparsers.required = True

    list_parser = subparsers.add_parser('list',
                                        help='List the buckets of the configured credentials',
                                        epilog='Ex. blobstore bucket list')
    list_parser.add_argument('--format-type', '-t',
                             dest='format_type',
                             choices=('json', 'text'), default='text',
                             help='Specify the output format type (Default text).')
    list_parser.set_defaults(func=_list_buckets)

    exists_parser = subparsers.add_parser('exists',
                                          help='Check whether a bucket exists',
                                          epilog='Ex. blobstore bucket exists my-bucket')
    exists_parser.add_argument('bucket', help='The name of the bucket.')
    exists_parser.set_defaults(func=_bucket_exists)

    create_parser = subparsers.add_parser('create',
                                          help='Create a bucket',
                                          epilog='Ex. blobstore bucket create my-bucket '
                                                 '--region eu-west-1')
    create_parser.add_argument('bucket', help='The name of the bucket.')
    create_parser.add_argument('--region', '-r',
                               help='The region of the bucket. Defaults to the backend default.')
    create_parser.set_defaults(func=_create_bucket)

    delete_parser = subparsers.add_parser('delete',
                                          help='Delete an empty bucket',
                                          epilog='Ex. blobstore bucket delete my-bucket')
    delete_parser.add_argument('bucket', help='The name of the bucket.')
    delete_parser.set_defaults(func=_delete_bucket)

    cleanup_parser = subparsers.add_parser('cleanup',
                                           help='Abort abandoned multipart uploads of a bucket',
                                           epilog='Ex. blobstore bucket cleanup my-bucket')
    cleanup_parser.add_argument('bucket', help='The name of the bucket.')
    cleanup_parser.set_defaults(func=_cleanup_bucket)


def _list_buckets(storage_service: service.StorageService, args: argparse.Namespace):
    buckets = storage_service.list_buckets()
    if args.format_type == 'json':
        print(json.dumps({'buckets': [bucket.name for bucket in buckets]},
                         indent=common.JSON_INDENT_SIZE))
    else:
        table = common.blobstore_table(header=['Bucket'])
        for bucket in buckets:
            table.add_row([bucket.name])
        print(f'{table.draw()}\n')


def _bucket_exists(storage_service: service.StorageService, args: argparse.Namespace):
    exists = storage_service.bucket_exists(args.bucket)
    print(f'Bucket {args.bucket} {"exists" if exists else "does not exist"}')


def _create_bucket(storage_service: service.StorageService, args: argparse.Namespace):
    storage_service.create_bucket(args.bucket, args.region)
    print(f'Bucket {args.bucket} created')


def _delete_bucket(storage_service: service.StorageService, args: argparse.Namespace):
    storage_service.delete_bucket(args.bucket)
    print(f'Bucket {args.bucket} deleted')


def _cleanup_bucket(storage_service: service.StorageService, args: argparse.Namespace):
    aborted = storage_service.abort_abandoned_multipart_uploads(args.bucket)
    print(f'Aborted {aborted} abandoned multipart uploads in {args.bucket}')
