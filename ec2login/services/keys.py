"""SSH private key resolution from Secrets Manager or the local SSH directory."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
import types
from contextlib import ExitStack
from pathlib import Path
from typing import TYPE_CHECKING

from ec2login.constants import DEFAULT_KEY_SUFFIX, SECRET_KEY_FILE_PREFIX
from ec2login.exceptions import (
    DirectoryReadError,
    InsecureKeyError,
    KeyFileWriteError,
)

if TYPE_CHECKING:
    from ec2login.providers.aws.secrets import SecretStore

logger = logging.getLogger(__name__)

PRIVATE_KEY_MODE = 0o600


class SecretKeyFile:
    """Transient key file owned by the current invocation.

    The file is removed by ``cleanup()``, which also runs when the object is
    used as a context manager. Calling ``cleanup()`` more than once is safe.
    A handle may be created before its file so that cleanup can be
    registered first; ``path`` is then set once the file exists.

    Parameters
    ----------
    path : Path | None
        Location of the written key file
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._removed = False

    def cleanup(self) -> None:
        """Delete the key file."""
        if self._removed or self.path is None:
            return
        self._removed = True

        try:
            self.path.unlink()
            logger.debug("Removed transient key file %s", self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to remove key file %s: %s", self.path, e)

    def __enter__(self) -> Path | None:
        return self.path

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        self.cleanup()


def write_private_key(
    material: bytes,
    suffix: str = DEFAULT_KEY_SUFFIX,
    stack: ExitStack | None = None,
) -> SecretKeyFile:
    """Write key material to a new owner-only temporary file.

    The file is removed again if anything, including KeyboardInterrupt or
    SystemExit, interrupts the write.

    Parameters
    ----------
    material : bytes
        Private key bytes, written verbatim
    suffix : str
        File name suffix
    stack : ExitStack | None
        When given, cleanup is registered on it before the file is created

    Returns
    -------
    SecretKeyFile
        Handle owning the new file

    Raises
    ------
    KeyFileWriteError
        If the file cannot be created, written or restricted
    """
    key_file = SecretKeyFile()
    if stack is not None:
        stack.callback(key_file.cleanup)

    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            prefix=SECRET_KEY_FILE_PREFIX,
            suffix=suffix,
            delete=False,
        ) as f:
            key_file.path = Path(f.name)
            f.write(material)

        key_file.path.chmod(PRIVATE_KEY_MODE)
    except OSError as e:
        key_file.cleanup()
        raise KeyFileWriteError(f"Failed to write temporary key file: {e}") from e
    except BaseException:
        key_file.cleanup()
        raise

    return key_file


def fetch_secret_key(
    secret_store: SecretStore,
    secret_id: str,
    suffix: str = DEFAULT_KEY_SUFFIX,
    stack: ExitStack | None = None,
) -> SecretKeyFile:
    """Fetch a private key from the secret store into a transient file.

    Parameters
    ----------
    secret_store : SecretStore
        Secrets Manager wrapper
    secret_id : str
        Secret name, the instance's key pair name
    suffix : str
        File name suffix for the temporary file
    stack : ExitStack | None
        Exit stack that takes ownership of the file's removal

    Returns
    -------
    SecretKeyFile
        Handle owning the written key file; without ``stack`` the caller
        must clean it up

    Raises
    ------
    SecretFetchError
        If the secret cannot be read
    KeyFileWriteError
        If the temporary file cannot be written
    """
    material = secret_store.get_secret_bytes(secret_id)
    key_file = write_private_key(material, suffix=suffix, stack=stack)
    logger.debug("Wrote key %s to %s", secret_id, key_file.path)
    return key_file


def find_local_key(
    key_name: str, ssh_dir: str | Path, suffix: str = DEFAULT_KEY_SUFFIX
) -> Path | None:
    """Find a key file for ``key_name`` in the local SSH directory.

    Candidates start with ``key_name`` and end with ``suffix``. The exact
    ``<key_name><suffix>`` file wins; otherwise the first candidate in sorted
    order is returned.

    Parameters
    ----------
    key_name : str
        Key pair name of the instance
    ssh_dir : str | Path
        Directory to search, ``~`` is expanded
    suffix : str
        Required file name suffix

    Returns
    -------
    Path | None
        Matching key file, or None if nothing matches

    Raises
    ------
    DirectoryReadError
        If the directory cannot be listed
    """
    directory = Path(ssh_dir).expanduser()

    try:
        entries = sorted(os.listdir(directory))
    except OSError as e:
        raise DirectoryReadError(f"Cannot read SSH directory {directory}: {e}") from e

    candidates = [
        entry
        for entry in entries
        if entry.startswith(key_name) and entry.endswith(suffix)
    ]

    if not candidates:
        return None

    exact = f"{key_name}{suffix}"
    chosen = exact if exact in candidates else candidates[0]

    if len(candidates) > 1:
        logger.debug("Multiple keys match %s: %s; using %s", key_name, candidates, chosen)

    return directory / chosen


def check_key_permissions(key_path: Path) -> None:
    """Reject key files that group or other users can access.

    Raises
    ------
    InsecureKeyError
        If the file mode has any group or other permission bit set
    """
    try:
        mode = stat.S_IMODE(key_path.stat().st_mode)
    except OSError as e:
        raise InsecureKeyError(f"Cannot stat key file {key_path}: {e}") from e

    if mode & 0o077:
        raise InsecureKeyError(
            f"Key file {key_path} has permissions {oct(mode)}; "
            f"run: chmod 600 {key_path}"
        )
