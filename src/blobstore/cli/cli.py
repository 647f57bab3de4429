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

import logging
import sys
import traceback

import pydantic

from . import main_parser
from .. import service
from ..core import config
from ..utils import errors, logging as logging_utils


logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = main_parser.create_cli_parser()
    args = parser.parse_args(argv)

    logging_utils.configure_logging(
        logging_utils.LogSettings(level=args.log_level, log_dir=args.log_dir),
    )
    logger.debug('Running blobstore CLI command: %s', ' '.join(sys.argv[1:]))

    if not hasattr(args, 'func'):
        parser.print_help()
        return 0

    # Only print the error message for expected errors, print the traceback otherwise.
    message = None
    exit_code = 0
    try:
        settings = config.StorageSettings(endpoint_url=args.endpoint_url)
        with service.StorageService(settings) as storage_service:
            args.func(storage_service, args)
    except pydantic.ValidationError as e:
        message = f'Invalid configuration: {e}'
        exit_code = 2
    except errors.BlobStoreError as e:
        message = str(e)
        exit_code = 1
    except KeyboardInterrupt:
        exit_code = 3
    except Exception as e:  # pylint: disable=broad-except
        message = str(e) + '\n' + traceback.format_exc()
        exit_code = 2

    if message:
        print('Error message:', message, file=sys.stderr)
    return exit_code


if __name__ == '__main__':
    sys.exit(main())
