# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Password Script Executor

Single responsibility: turn an encoded source password into plaintext by
running a user-supplied decrypt script, and cache the result for a while.

Script contract: invoked as `<interpreter?> <script> <encoded>`; exit code 0
with non-empty stdout is the decoded password, anything else is a failure.
"""

import asyncio
import logging
import os
import time
from typing import Awaitable, Callable, Dict, List, Optional

from nuget_gallery.core.errors import (
    EmptyInputError,
    EmptyOutputError,
    NonZeroExitError,
    SpawnFailureError,
)
from nuget_gallery.models.catalog_models import CacheEntry

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 4096


def build_script_command(script_path: str, encoded_password: str) -> List[str]:
    """
    Build the argv used to run a decrypt script.

    Args:
        script_path: Path to the script
        encoded_password: Encoded secret, passed as the only positional argument

    Returns:
        Command line as a list (no shell interpolation)
    """
    lowered = script_path.lower()

    if lowered.endswith(".ps1"):
        return [
            "powershell.exe",
            "-NoProfile",
            "-ExecutionPolicy",
            "Bypass",
            "-File",
            script_path,
            encoded_password,
        ]
    if lowered.endswith(".bat") or lowered.endswith(".cmd"):
        return ["cmd.exe", "/c", script_path, encoded_password]
    return [script_path, encoded_password]


class PasswordScriptExecutor:
    """
    Runs decrypt scripts and caches decoded passwords.

    Cache key is `script_path:encoded_password`. Expired entries are only
    swept when a caller asks for it via clear_expired_cache().
    """

    CACHE_TTL_SECONDS = 5 * 60

    def __init__(
        self,
        cache_ttl: Optional[float] = None,
        spawn: Optional[Callable[..., Awaitable[asyncio.subprocess.Process]]] = None,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Initialize executor.

        Args:
            cache_ttl: Seconds a decoded password stays valid (default 5 minutes)
            spawn: Process factory with the asyncio.create_subprocess_exec signature
            clock: Monotonic clock used for cache timestamps
        """
        self.cache_ttl = self.CACHE_TTL_SECONDS if cache_ttl is None else cache_ttl
        self._spawn = spawn or asyncio.create_subprocess_exec
        self._clock = clock or time.monotonic
        self._cache: Dict[str, CacheEntry[str]] = {}

    async def execute_script(self, script_path: str, encoded_password: str) -> str:
        """
        Decode a password by running the given script.

        Args:
            script_path: Path to the decrypt script
            encoded_password: Encoded password from NuGet.Config

        Returns:
            Decoded password (trimmed stdout)

        Raises:
            EmptyInputError: If script path or password is blank
            SpawnFailureError: If the process could not be started
            NonZeroExitError: If the script exited with a non-zero code
            EmptyOutputError: If the script printed nothing
        """
        if not script_path or not script_path.strip():
            raise EmptyInputError("Password script path is empty or undefined")
        if not encoded_password or not encoded_password.strip():
            raise EmptyInputError(script_path=script_path)

        cache_key = f"{script_path}:{encoded_password}"
        cached = self._cache.get(cache_key)
        if cached and cached.is_valid(self._clock(), self.cache_ttl):
            logger.debug(f"Using cached decoded password for script {script_path}")
            return cached.value

        decoded = await self._run(script_path, encoded_password)

        self._cache[cache_key] = CacheEntry(value=decoded, timestamp=self._clock())
        return decoded

    async def _run(self, script_path: str, encoded_password: str) -> str:
        command = build_script_command(script_path, encoded_password)
        logger.info(f"Running password script: {script_path}")

        try:
            process = await self._spawn(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=os.getcwd(),
            )
        except OSError as e:
            logger.error(f"Failed to start password script {script_path}: {e}")
            raise SpawnFailureError(str(e), script_path=script_path)

        stdout_chunks: List[bytes] = []
        stderr_chunks: List[bytes] = []
        await asyncio.gather(
            self._drain(process.stdout, stdout_chunks, script_path, "stdout"),
            self._drain(process.stderr, stderr_chunks, script_path, "stderr"),
        )
        exit_code = await process.wait()

        output = b"".join(stdout_chunks).decode(errors="replace").strip()
        error_output = b"".join(stderr_chunks).decode(errors="replace").strip()

        if exit_code != 0:
            logger.error(f"Password script {script_path} exited with code {exit_code}")
            raise NonZeroExitError(exit_code, error_output, script_path=script_path)

        if not output:
            logger.error(f"Password script {script_path} returned empty output")
            raise EmptyOutputError(script_path=script_path)

        return output

    @staticmethod
    async def _drain(
        stream: Optional[asyncio.StreamReader],
        chunks: List[bytes],
        script_path: str,
        name: str
    ) -> None:
        if stream is None:
            return
        while True:
            chunk = await stream.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
            # stdout carries the decoded secret; only its size is mirrored
            if name == "stderr":
                logger.debug(f"[{script_path}] {chunk.decode(errors='replace').rstrip()}")
            else:
                logger.debug(f"[{script_path}] received {len(chunk)} bytes on stdout")

    def clear_cache(self) -> None:
        """Drop every cached decoded password"""
        self._cache.clear()

    def clear_expired_cache(self) -> int:
        """
        Drop only entries older than the TTL.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [
            key for key, entry in self._cache.items()
            if not entry.is_valid(now, self.cache_ttl)
        ]
        for key in expired:
            del self._cache[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._cache)
