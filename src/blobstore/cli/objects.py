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
import datetime
import json
import logging
import os

from .. import service
from ..utils import common


logger = logging.getLogger(__name__)


def setup_parser(parser: argparse._SubParsersAction):
    """
    Configures parser to manage and transfer objects.

    Args:
        parser: The parser to be configured.
    """
    object_parser = parser.add_parser('object',
        help='Command to list, transfer and delete objects.')
    subparsers = object_parser.add_subparsers(dest='command')
    subparsers.required = True

    list_parser = subparsers.add_parser('list',
                                        help='List the objects of a bucket sorted by key',
                                        epilog='Ex. blobstore object list my-bucket '
                                               '--prefix videos/')
    list_parser.add_argument('bucket', help='The name of the bucket.')
    list_parser.add_argument('--prefix', '-p',
                             help='Only list objects whose keys start with this prefix.')
    list_parser.add_argument('--format-type', '-t',
                             dest='format_type',
                             choices=('json', 'text'), default='text',
                             help='Specify the output format type (Default text).')
    list_parser.set_defaults(func=_list_objects)

    exists_parser = subparsers.add_parser('exists',
                                          help='Check whether an object exists',
                                          epilog='Ex. blobstore object exists my-bucket a/b.txt')
    exists_parser.add_argument('bucket', help='The name of the bucket.')
    exists_parser.add_argument('key', help='The key of the object.')
    exists_parser.set_defaults(func=_object_exists)

    put_parser = subparsers.add_parser('put',
                                       help='Upload a local file',
                                       epilog='Ex. blobstore object put my-bucket ./intro.mp4 '
                                              '--key videos/intro.mp4')
    put_parser.add_argument('bucket', help='The name of the bucket.')
    put_parser.add_argument('source', help='The local file to upload.')
    put_parser.add_argument('--key', '-k',
                            help='The key of the object. Defaults to the file name.')
    put_parser.set_defaults(func=_put_object)

    get_parser = subparsers.add_parser('get',
                                       help='Download an object into a local file',
                                       epilog='Ex. blobstore object get my-bucket '
                                              'videos/intro.mp4 ./intro.mp4')
    get_parser.add_argument('bucket', help='The name of the bucket.')
    get_parser.add_argument('key', help='The key of the object.')
    get_parser.add_argument('destination',
                            help='The local file to write. Overwritten if present.')
    get_parser.set_defaults(func=_get_object)

    delete_parser = subparsers.add_parser('delete',
                                          help='Delete an object',
                                          epilog='Ex. blobstore object delete my-bucket a/b.txt')
    delete_parser.add_argument('bucket', help='The name of the bucket.')
    delete_parser.add_argument('key', help='The key of the object.')
    delete_parser.set_defaults(func=_delete_object)

    url_parser = subparsers.add_parser('url',
                                       help='Create a presigned URL to read an object',
                                       epilog='Ex. blobstore object url my-bucket a/b.txt '
                                              '--expires-in 1h')
    url_parser.add_argument('bucket', help='The name of the bucket.')
    url_parser.add_argument('key', help='The key of the object.')
    url_parser.add_argument('--expires-in', '-e',
                            dest='expires_in',
                            type=common.to_timedelta, default=datetime.timedelta(hours=1),
                            help='How long the URL stays valid, e.g. 30m, 12h, 7d '
                                 '(Default 1h).')
    url_parser.set_defaults(func=_presign_object)


class _LogProgress:
    """
    Logs the progress of a transfer at debug level.
    """

    def __init__(self, name: str):
        self._name = name

    def __call__(self, bytes_so_far: int, total_bytes: int):
        logger.debug('%s: %s / %s', self._name,
                     common.storage_convert(bytes_so_far), common.storage_convert(total_bytes))


def _list_objects(storage_service: service.StorageService, args: argparse.Namespace):
    objects = storage_service.list_objects(args.bucket, args.prefix)
    if args.format_type == 'json':
        print(json.dumps(
            {'objects': [
                {
                    'key': obj.key,
                    'size': obj.size,
                    'last_modified': obj.last_modified.isoformat(),
                }
                for obj in objects
            ]},
            indent=common.JSON_INDENT_SIZE,
        ))
    else:
        table = common.blobstore_table(header=['Key', 'Size', 'Last Modified'])
        table.set_cols_dtype(['t', 't', 't'])
        for obj in objects:
            table.add_row([
                obj.key,
                common.storage_convert(obj.size),
                obj.last_modified.strftime('%b %d, %Y %H:%M'),
            ])
        print(f'{table.draw()}\n')


def _object_exists(storage_service: service.StorageService, args: argparse.Namespace):
    exists = storage_service.object_exists(args.bucket, args.key)
    print(f'Object {args.bucket}/{args.key} {"exists" if exists else "does not exist"}')


def _put_object(storage_service: service.StorageService, args: argparse.Namespace):
    key = args.key or os.path.basename(args.source)
    summary = storage_service.upload(args.bucket, key, args.source,
                                     on_progress=_LogProgress(args.source))
    print(f'Uploaded {args.source} to {args.bucket}/{key} '
          f'({common.storage_convert(summary.size)} in '
          f'{summary.elapsed_time.total_seconds():.1f}s)')


def _get_object(storage_service: service.StorageService, args: argparse.Namespace):
    summary = storage_service.download(args.bucket, args.key, args.destination,
                                       on_progress=_LogProgress(args.key))
    print(f'Downloaded {args.bucket}/{args.key} to {args.destination} '
          f'({common.storage_convert(summary.size)} in '
          f'{summary.elapsed_time.total_seconds():.1f}s)')


def _delete_object(storage_service: service.StorageService, args: argparse.Namespace):
    storage_service.delete_object(args.bucket, args.key)
    print(f'Object {args.bucket}/{args.key} deleted')


def _presign_object(storage_service: service.StorageService, args: argparse.Namespace):
    expires = common.current_time() + args.expires_in
    print(storage_service.presigned_url(args.bucket, args.key, expires))
