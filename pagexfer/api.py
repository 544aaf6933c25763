# Copyright (c) Microsoft Corporation
#
# All rights reserved.
#
# MIT License
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED *AS IS*, WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
# FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
# DEALINGS IN THE SOFTWARE.

# stdlib imports
# non-stdlib imports
# local imports

# clients
from .operations.azure.blob.page import (  # noqa
    create_client as create_page_blob_client
)

# errors
from .errors import (  # noqa
    PageXferError,
    AllocationError,
    ChunkWriteError,
    TransientWriteError,
    CopyError,
)

# models
from .models.options import (  # noqa
    Timeout as TimeoutOptions,
    Retry as RetryOptions,
    Concurrency as ConcurrencyOptions,
    General as GeneralOptions,
    Upload as UploadOptions
)
from .models.upload import (  # noqa
    Chunk,
    ChunkQueue,
    compute_chunks,
    Specification as UploadSpecification
)

# operations
from .operations.azure import (  # noqa
    StorageCredentials as AzureStorageCredentials
)
from .operations.copy import (  # noqa
    copy_blob
)
from .operations.upload import (  # noqa
    Uploader,
    UploadState
)
