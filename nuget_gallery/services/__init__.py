# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Service layer for the gallery engine.

- credentials: password script decoding and the credentials cache
- sources: NuGet.Config discovery, parsing and merging
- catalog: NuGet v3 clients and the catalog service
"""
