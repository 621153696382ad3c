# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Credential handling: decrypt-script execution and the shared credentials cache.
"""

from .credentials_cache import CredentialsCache
from .password_script import PasswordScriptExecutor, build_script_command

__all__ = [
    "CredentialsCache",
    "PasswordScriptExecutor",
    "build_script_command",
]
